"""Exception types raised by hookbox."""


class HookboxError(Exception):
    """Base class for all hookbox errors."""


class KeyNotFound(HookboxError, KeyError):
    """A keyed container was read at a key it does not hold."""

    def __init__(self, key: object) -> None:
        super().__init__(key)
        self.key = key


class InvalidInitialValue(HookboxError, TypeError):
    """A container was seeded (or replaced) with something that is not a mapping/set."""


class HookError(HookboxError, RuntimeError):
    """A hook was misused, or state was read after its View was disposed.

    Raised when a hook runs outside a render, when hooks change order between
    renders, and when a released StateCell is read.
    """


class RenderLoopError(HookboxError, RuntimeError):
    """A view kept scheduling itself while rendering."""
