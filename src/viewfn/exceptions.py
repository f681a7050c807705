"""viewfn Exceptions

Errors raised by the function table and its hosts.

Template functions themselves never raise for bad input: they degrade to a
neutral value, or return an Outcome for the few fallible operations.
"""

from __future__ import annotations


class ViewfnError(Exception):
    """Base exception for all viewfn errors."""

    pass


class FunctionNotFoundError(ViewfnError):
    """Raised when a function name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function not found: {name}")


class DuplicateFunctionError(ViewfnError):
    """Raised when a canonical function name is registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function already registered: {name}")


class FunctionFailedError(ViewfnError):
    """Raised by the host when a fallible function reports a failure."""

    def __init__(self, name: str, error: str):
        self.name = name
        self.error = error
        super().__init__(f"{name} failed: {error}")


class ConfigError(ViewfnError):
    """Raised when viewfn.yaml cannot be loaded."""

    pass
