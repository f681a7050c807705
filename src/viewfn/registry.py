"""Function table for templates.

Every built-in is registered under a canonical namespaced name
(``collections.First``, ``strings.Truncate``). Short names such as ``first``
or ``truncate`` are alias records that resolve to the same entry, so an alias
and its canonical name always return the identical callable.

Usage:
    table = build_table(ViewfnConfig(seed=42))
    table.get("first")(2, [1, 2, 3])   # [1, 2]
    table.resolve("first").name        # "collections.First"
"""

from __future__ import annotations

import inspect
import logging
import random
from functools import partial
from typing import Any, Callable, Iterable, Literal, NamedTuple

from viewfn.config import ViewfnConfig
from viewfn.core import cast, collections, compare
from viewfn.exceptions import DuplicateFunctionError, FunctionNotFoundError
from viewfn.funcs import (
    crypto,
    encoding,
    fmt,
    maths,
    paths,
    reflect,
    strings,
    timefmt,
    transform,
    urls,
)

log = logging.getLogger(__name__)

Subject = Literal["first", "last"]


class Entry(NamedTuple):
    """A registered function.

    ``subject`` names the positional argument that receives a piped value
    when the function is used as a filter: most functions take their input
    first, a few (``collections.First``, ``compare.Default`` ...) take it last.
    """

    name: str
    func: Callable[..., Any]
    arity: int
    variadic: bool
    fallible: bool = False
    subject: Subject = "first"
    doc: str = ""

    @property
    def namespace(self) -> str:
        return self.name.partition(".")[0] if "." in self.name else ""

    @property
    def short_name(self) -> str:
        return self.name.rpartition(".")[2]


def _signature_arity(func: Callable[..., Any]) -> tuple[int, bool]:
    """Required positional parameter count and whether ``*args`` is accepted."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 0, True

    arity = 0
    variadic = False
    for param in signature.parameters.values():
        if param.kind is param.VAR_POSITIONAL:
            variadic = True
        elif (
            param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
            and param.default is param.empty
        ):
            arity += 1
    return arity, variadic


def _summary(func: Callable[..., Any]) -> str:
    target = func.func if isinstance(func, partial) else func
    doc = inspect.getdoc(target) or ""
    return doc.splitlines()[0] if doc else ""


class FunctionTable:
    """Canonical entries plus alias records."""

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._aliases: dict[str, str] = {}
        self.rng: random.Random | None = None

    def register(
        self,
        name: str,
        func: Callable[..., Any],
        *,
        aliases: Iterable[str] = (),
        fallible: bool = False,
        subject: Subject = "first",
    ) -> Entry:
        """Add a canonical entry and, optionally, aliases for it.

        Raises:
            DuplicateFunctionError: If ``name`` is already registered.
        """
        if name in self._entries:
            raise DuplicateFunctionError(name)

        arity, variadic = _signature_arity(func)
        entry = Entry(
            name=name,
            func=func,
            arity=arity,
            variadic=variadic,
            fallible=fallible,
            subject=subject,
            doc=_summary(func),
        )
        self._entries[name] = entry
        for alias in aliases:
            self.alias(alias, name)
        return entry

    def alias(self, alias: str, target: str) -> None:
        """Point ``alias`` at the entry ``target`` resolves to.

        Aliasing an alias records the canonical name. Re-aliasing replaces
        the previous record.

        Raises:
            FunctionNotFoundError: If ``target`` does not resolve.
        """
        entry = self.resolve(target)
        self._aliases[alias] = entry.name

    def resolve(self, name: str) -> Entry:
        """Canonical entry for a canonical name or an alias."""
        canonical = self._aliases.get(name, name)
        try:
            return self._entries[canonical]
        except KeyError:
            raise FunctionNotFoundError(name) from None

    def get(self, name: str) -> Callable[..., Any] | None:
        """Callable for ``name``, or None if it is not registered."""
        try:
            return self.resolve(name).func
        except FunctionNotFoundError:
            return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and (name in self._entries or name in self._aliases)

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        """Sorted canonical names."""
        return sorted(self._entries)

    def aliases(self) -> dict[str, str]:
        """Alias → canonical name, sorted by alias."""
        return dict(sorted(self._aliases.items()))

    def entries(self, namespace: str | None = None) -> list[Entry]:
        return [
            self._entries[name]
            for name in self.names()
            if namespace is None or self._entries[name].namespace == namespace
        ]

    def namespaces(self) -> list[str]:
        """Namespaces of canonical names and of dotted aliases."""
        found = {entry.namespace for entry in self._entries.values()}
        found.update(alias.partition(".")[0] for alias in self._aliases if "." in alias)
        found.discard("")
        return sorted(found)

    def as_mapping(self, include_aliases: bool = True) -> dict[str, Callable[..., Any]]:
        """Flat ``{name: callable}`` view of the table."""
        mapping = {name: entry.func for name, entry in self._entries.items()}
        if include_aliases:
            for alias, target in self._aliases.items():
                mapping[alias] = self._entries[target].func
        return mapping


# =============================================================================
# Built-in table
# =============================================================================

FALLIBLE: frozenset[str] = frozenset(
    {
        "encoding.Base64Decode",
        "encoding.Jsonify",
        "time.ParseDuration",
        "urls.Parse",
    }
)

# Functions whose primary input is their last positional argument
PIPE_LAST: frozenset[str] = frozenset(
    {
        "collections.After",
        "collections.First",
        "collections.Last",
        "compare.Default",
        "fmt.Printf",
        "strings.FindRE",
        "strings.ReplaceRE",
        "time.Format",
    }
)

# Dotted aliases that stand in for a whole canonical name
NAMESPACED_ALIASES: dict[str, str] = {
    "hash.FNV32a": "crypto.FNV32a",
}

BUILTIN_ALIASES: dict[str, str] = {
    "add": "math.Add",
    "sub": "math.Sub",
    "mul": "math.Mul",
    "div": "math.Div",
    "mod": "math.Mod",
    "abs": "math.Abs",
    "ceil": "math.Ceil",
    "floor": "math.Floor",
    "round": "math.Round",
    "sqrt": "math.Sqrt",
    "pow": "math.Pow",
    "max": "math.Max",
    "min": "math.Min",
    "after": "collections.After",
    "append": "collections.Append",
    "apply": "collections.Apply",
    "base64Decode": "encoding.Base64Decode",
    "base64Encode": "encoding.Base64Encode",
    "chomp": "strings.Chomp",
    "contains": "strings.Contains",
    "countRunes": "strings.CountRunes",
    "countWords": "strings.CountWords",
    "default": "compare.Default",
    "delimit": "collections.Delimit",
    "dict": "collections.Dictionary",
    "eq": "compare.Eq",
    "first": "collections.First",
    "ge": "compare.Ge",
    "gt": "compare.Gt",
    "hasPrefix": "strings.HasPrefix",
    "hasSuffix": "strings.HasSuffix",
    "htmlEscape": "transform.HTMLEscape",
    "htmlUnescape": "transform.HTMLUnescape",
    "in": "collections.In",
    "index": "collections.Index",
    "int": "cast.ToInt",
    "intersect": "collections.Intersect",
    "isSet": "collections.IsSet",
    "jsonify": "encoding.Jsonify",
    "last": "collections.Last",
    "le": "compare.Le",
    "lower": "strings.ToLower",
    "lt": "compare.Lt",
    "markdownify": "transform.Markdownify",
    "md5": "crypto.MD5",
    "ne": "compare.Ne",
    "now": "time.Now",
    "plainify": "transform.Plainify",
    "print": "fmt.Print",
    "printf": "fmt.Printf",
    "println": "fmt.Println",
    "querify": "collections.Querify",
    "replace": "strings.Replace",
    "replaceRE": "strings.ReplaceRE",
    "reverse": "collections.Reverse",
    "seq": "collections.Seq",
    "sha1": "crypto.SHA1",
    "sha256": "crypto.SHA256",
    "shuffle": "collections.Shuffle",
    "slice": "collections.Slice",
    "sort": "collections.Sort",
    "split": "strings.Split",
    "string": "cast.ToString",
    "substr": "strings.Substr",
    "title": "strings.Title",
    "trim": "strings.Trim",
    "truncate": "strings.Truncate",
    "union": "collections.Union",
    "uniq": "collections.Uniq",
    "upper": "strings.ToUpper",
    "urlize": "urls.URLize",
    "where": "collections.Where",
}


def _builtin_functions(
    table: FunctionTable, config: ViewfnConfig, rng: random.Random
) -> dict[str, Callable[..., Any]]:
    """Canonical name → callable, with per-table state bound in."""
    return {
        "cast.ToFloat": cast.to_float,
        "cast.ToInt": cast.to_int,
        "cast.ToString": cast.to_text,
        "collections.After": collections.after,
        "collections.Append": collections.append,
        "collections.Apply": partial(collections.apply, table),
        "collections.Complement": collections.complement,
        "collections.Delimit": collections.delimit,
        "collections.Dictionary": collections.dictionary,
        "collections.First": collections.first,
        "collections.In": collections.in_,
        "collections.Index": collections.index,
        "collections.Intersect": collections.intersect,
        "collections.IsSet": collections.is_set,
        "collections.Last": collections.last,
        "collections.Merge": collections.merge,
        "collections.Querify": collections.querify,
        "collections.Reverse": collections.reverse,
        "collections.Seq": collections.seq,
        "collections.Shuffle": partial(collections.shuffle, rng=rng),
        "collections.Slice": collections.slice_,
        "collections.Sort": collections.sort,
        "collections.Union": collections.union,
        "collections.Uniq": collections.uniq,
        "collections.Where": collections.where,
        "compare.Conditional": compare.conditional,
        "compare.Default": compare.default,
        "compare.Eq": compare.equal,
        "compare.Ge": compare.ge,
        "compare.Gt": compare.gt,
        "compare.Le": compare.le,
        "compare.Lt": compare.lt,
        "compare.Ne": compare.ne,
        "crypto.FNV32a": crypto.fnv32a,
        "crypto.MD5": crypto.md5,
        "crypto.SHA1": crypto.sha1,
        "crypto.SHA256": crypto.sha256,
        "encoding.Base64Decode": encoding.base64_decode,
        "encoding.Base64Encode": encoding.base64_encode,
        "encoding.Jsonify": encoding.jsonify,
        "fmt.Print": fmt.print_,
        "fmt.Printf": fmt.printf,
        "fmt.Println": fmt.println,
        "math.Abs": maths.abs_,
        "math.Add": maths.add,
        "math.Ceil": maths.ceil,
        "math.Div": maths.div,
        "math.Floor": maths.floor,
        "math.Max": maths.max_,
        "math.Min": maths.min_,
        "math.Mod": maths.mod,
        "math.Mul": maths.mul,
        "math.Pi": maths.pi,
        "math.Pow": maths.pow_,
        "math.Rand": partial(maths.rand, rng=rng),
        "math.Round": maths.round_,
        "math.Sqrt": maths.sqrt,
        "math.Sub": maths.sub,
        "path.Base": paths.base,
        "path.BaseName": paths.base_name,
        "path.Clean": paths.clean,
        "path.Dir": paths.dir_,
        "path.Ext": paths.ext,
        "path.Join": paths.join,
        "path.Split": paths.split,
        "reflect.IsMap": reflect.is_map,
        "reflect.IsSlice": reflect.is_slice,
        "strings.Chomp": strings.chomp,
        "strings.Contains": strings.contains,
        "strings.ContainsAny": strings.contains_any,
        "strings.ContainsNonSpace": strings.contains_non_space,
        "strings.Count": strings.count,
        "strings.CountRunes": strings.count_runes,
        "strings.CountWords": strings.count_words,
        "strings.FindRE": strings.find_re,
        "strings.FirstUpper": strings.first_upper,
        "strings.HasPrefix": strings.has_prefix,
        "strings.HasSuffix": strings.has_suffix,
        "strings.Repeat": strings.repeat,
        "strings.Replace": strings.replace,
        "strings.ReplaceRE": strings.replace_re,
        "strings.RuneCount": strings.rune_count,
        "strings.SliceString": strings.slice_string,
        "strings.Split": strings.split,
        "strings.Substr": strings.substr,
        "strings.Title": strings.title,
        "strings.ToLower": strings.to_lower,
        "strings.ToUpper": strings.to_upper,
        "strings.Trim": strings.trim,
        "strings.TrimLeft": strings.trim_left,
        "strings.TrimPrefix": strings.trim_prefix,
        "strings.TrimRight": strings.trim_right,
        "strings.TrimSpace": strings.trim_space,
        "strings.TrimSuffix": strings.trim_suffix,
        "strings.Truncate": partial(strings.truncate, default_suffix=config.truncate_suffix),
        "time.AsTime": timefmt.as_time,
        "time.Format": timefmt.format_,
        "time.Now": timefmt.now,
        "time.ParseDuration": timefmt.parse_duration,
        "transform.HTMLEscape": transform.html_escape,
        "transform.HTMLUnescape": transform.html_unescape,
        "transform.Markdownify": transform.markdownify,
        "transform.Plainify": transform.plainify,
        "urls.AbsURL": partial(urls.abs_url, base_url=config.base_url),
        "urls.Anchorize": urls.anchorize,
        "urls.JoinPath": urls.join_path,
        "urls.Parse": urls.parse,
        "urls.RelURL": urls.rel_url,
        "urls.URLize": urls.urlize,
    }


def _namespace_enabled(name: str, config: ViewfnConfig) -> bool:
    if config.namespaces is None:
        return True
    return name.partition(".")[0] in config.namespaces


def build_table(
    config: ViewfnConfig | None = None, rng: random.Random | None = None
) -> FunctionTable:
    """Build the default function table.

    Args:
        config: Table options; defaults to ``ViewfnConfig()``.
        rng: Random source for ``collections.Shuffle`` and ``math.Rand``.
            When omitted, a generator seeded with ``config.seed`` is created,
            so tables built from a seeded config are reproducible. The
            generator belongs to the table: every call through it, including
            concurrent renders through one environment, draws from the same
            stream. Build a separate table (or environment) per render for
            independent streams.

    Returns:
        A new FunctionTable owning its own random source.

    Raises:
        FunctionNotFoundError: If ``config.functions`` aliases a name that is
            not in the table.
    """
    config = config or ViewfnConfig()
    if rng is None:
        rng = random.Random(config.seed)

    table = FunctionTable()
    table.rng = rng

    for name, func in _builtin_functions(table, config, rng).items():
        if not _namespace_enabled(name, config):
            continue
        table.register(
            name,
            func,
            fallible=name in FALLIBLE,
            subject="last" if name in PIPE_LAST else "first",
        )

    for alias, target in NAMESPACED_ALIASES.items():
        if _namespace_enabled(alias, config) and target in table:
            table.alias(alias, target)

    if config.aliases:
        for alias, target in BUILTIN_ALIASES.items():
            if target in table:
                table.alias(alias, target)

    for alias, target in config.functions.items():
        table.alias(alias, target)

    log.debug(
        "Built function table: %d functions, %d aliases",
        len(table),
        len(table.aliases()),
    )
    return table
