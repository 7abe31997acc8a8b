"""hookbox: reactive keyed and unique containers with stable actions."""

from importlib.metadata import version as _version

__version__ = _version("hookbox")

from hookbox._tracking import get_pending_count
from hookbox.errors import (
    HookboxError,
    KeyNotFound,
    InvalidInitialValue,
    HookError,
    RenderLoopError,
)
from hookbox.cell import StateCell, Ref, set_scheduler
from hookbox.view import View, render
from hookbox.hooks import use_cell, use_state, use_ref, use_memo, use_callback, use_rerender
from hookbox.action import batch, transaction
from hookbox._bridge import COUNTER, REPLACE, set_default_strategy, get_default_strategy
from hookbox.keyed import MapActions, use_map
from hookbox.unique import SetActions, use_set
# textual NOT auto-imported, opt-in only

__all__ = [
    "use_map",
    "use_set",
    "MapActions",
    "SetActions",
    "COUNTER",
    "REPLACE",
    "set_default_strategy",
    "get_default_strategy",
    "StateCell",
    "Ref",
    "View",
    "render",
    "use_state",
    "use_cell",
    "use_ref",
    "use_memo",
    "use_callback",
    "use_rerender",
    "batch",
    "transaction",
    "get_pending_count",
    "set_scheduler",
    "HookboxError",
    "KeyNotFound",
    "InvalidInitialValue",
    "HookError",
    "RenderLoopError",
]
