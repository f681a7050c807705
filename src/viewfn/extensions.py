"""Jinja2 integration for viewfn function tables."""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Iterator, Mapping

from jinja2 import Environment, Undefined

from viewfn.config import OnFailure, ViewfnConfig
from viewfn.core.value import Outcome
from viewfn.exceptions import FunctionFailedError
from viewfn.registry import Entry, FunctionTable, build_table

log = logging.getLogger(__name__)


class Namespace:
    """Attribute access to the functions of one namespace.

    Jinja cannot call dotted names directly, so each namespace is installed
    as a global object:

        {{ strings.ToUpper(name) }}
        {{ collections.Where(pages, "draft", false) | length }}
    """

    def __init__(self, name: str):
        self.name = name
        self._functions: dict[str, Callable[..., Any]] = {}

    def add(self, name: str, func: Callable[..., Any]) -> None:
        self._functions[name] = func

    def __getattr__(self, attr: str) -> Callable[..., Any]:
        if attr.startswith("_"):
            raise AttributeError(attr)
        try:
            return self._functions[attr]
        except KeyError:
            raise AttributeError(f"{self.name} has no function {attr!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._functions))

    def __repr__(self) -> str:
        return f"<Namespace {self.name} ({len(self._functions)} functions)>"


def _defined(value: Any) -> Any:
    # Undefined template variables reach functions as Unset
    return None if isinstance(value, Undefined) else value


def _settle(name: str, outcome: Outcome, on_failure: OnFailure) -> Any:
    """Turn a fallible function's Outcome into a template value."""
    if on_failure == "keep":
        return outcome
    if outcome.ok:
        return outcome.value
    if on_failure == "raise":
        raise FunctionFailedError(name, outcome.error or "")
    log.warning("%s failed: %s", name, outcome.error)
    return ""


def _host_function(entry: Entry, on_failure: OnFailure) -> Callable[..., Any]:
    func = entry.func

    def call(*args: Any, **kwargs: Any) -> Any:
        args = tuple(_defined(arg) for arg in args)
        kwargs = {key: _defined(value) for key, value in kwargs.items()}
        result = func(*args, **kwargs)
        if entry.fallible and isinstance(result, Outcome):
            return _settle(entry.name, result, on_failure)
        return result

    call.__name__ = entry.short_name
    call.__doc__ = entry.doc
    return call


def _as_filter(entry: Entry, call: Callable[..., Any]) -> Callable[..., Any]:
    """Adapt a function so the piped value lands in its subject position.

    ``xs | first(2)`` calls ``first(2, xs)``; ``s | truncate(10)`` calls
    ``truncate(s, 10)``.
    """
    if entry.subject == "last":

        def pipe_last(value: Any, *args: Any, **kwargs: Any) -> Any:
            return call(*args, value, **kwargs)

        return pipe_last

    def pipe_first(value: Any, *args: Any, **kwargs: Any) -> Any:
        return call(value, *args, **kwargs)

    return pipe_first


def install_table(env: Environment, table: FunctionTable, config: ViewfnConfig) -> None:
    """Expose a function table in ``env``.

    Namespaces become global objects and aliases become globals. With
    ``config.filters`` each alias is also a filter, unless Jinja already has
    a built-in filter of that name (``first``, ``sort``, ``default`` ...),
    which keeps its Jinja meaning.
    """
    builtin_filters = set(env.filters)
    namespaces = {name: Namespace(name) for name in table.namespaces()}
    wrapped: dict[str, Callable[..., Any]] = {}

    for entry in table.entries():
        call = _host_function(entry, config.on_failure)
        wrapped[entry.name] = call
        if entry.namespace:
            namespaces[entry.namespace].add(entry.short_name, call)
        else:
            env.globals[entry.name] = call

    for alias, target in table.aliases().items():
        call = wrapped[target]
        if "." in alias:
            namespace, _, short = alias.partition(".")
            namespaces[namespace].add(short, call)
            continue
        env.globals[alias] = call
        if config.filters and alias not in builtin_filters:
            env.filters[alias] = _as_filter(table.resolve(target), call)

    env.globals.update(namespaces)


def install_functions(
    env: Environment, functions: Mapping[str, Callable[..., Any]], filters: bool = True
) -> None:
    """Install caller-supplied functions over whatever ``env`` already has.

    Dotted names (``strings.Shout``) are added to, or replace entries in,
    the matching namespace object.
    """
    for name, func in functions.items():
        if "." in name:
            namespace_name, _, short = name.partition(".")
            namespace = env.globals.get(namespace_name)
            if not isinstance(namespace, Namespace):
                namespace = Namespace(namespace_name)
                env.globals[namespace_name] = namespace
            namespace.add(short, func)
            continue
        env.globals[name] = func
        if filters:
            env.filters[name] = func


def get_viewfn_jinja_env(
    config: ViewfnConfig | None = None,
    functions: Mapping[str, Callable[..., Any]] | None = None,
    rng: random.Random | None = None,
    **env_kwargs: Any,
) -> Environment:
    """Create a Jinja2 Environment with the viewfn function table.

    Args:
        config: Table and host options.
        functions: Extra functions; installed last, so they win on name clashes.
        rng: Random source for the table (see ``build_table``).
        **env_kwargs: Passed to ``jinja2.Environment``.

    Returns:
        Configured Jinja2 Environment. The table is available as
        ``env.viewfn_table``.
    """
    config = config or ViewfnConfig()
    table = build_table(config, rng)

    env = Environment(**env_kwargs)
    install_table(env, table, config)
    if functions:
        install_functions(env, functions, filters=config.filters)

    # Runtime attribute, not part of Environment's type definition
    env.viewfn_table = table  # type: ignore[attr-defined]
    return env


def render_string(
    source: str,
    data: Mapping[str, Any] | None = None,
    config: ViewfnConfig | None = None,
    functions: Mapping[str, Callable[..., Any]] | None = None,
    rng: random.Random | None = None,
) -> str:
    """Render one template string with the viewfn functions available."""
    env = get_viewfn_jinja_env(config, functions=functions, rng=rng)
    return env.from_string(source).render(dict(data or {}))
