"""Textual integration for hookbox. Opt-in: requires textual.

Lets a Textual app act as the host of a component: each settled render
result is pushed into a widget-updating callback on the UI thread.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches
from hookbox.view import render as _render

logger = logging.getLogger("hookbox.textual")

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded views during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def render(app, component, effect_fn, *args):
    """render() whose results safely reach Textual widgets.

    Skips effects during pause/not-running, swallows NoMatches from widget
    queries, and marshals cross-thread calls via call_from_thread.
    The component itself always renders, so its state stays current.
    """
    _main = threading.get_ident()

    def _guarded(result):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, result)
        else:
            _safe(result)

    def _safe(result):
        try:
            effect_fn(result)
        except NoMatches:
            logger.debug("%s: widget gone, result dropped", component.__name__)

    return _render(component, *args, on_render=_guarded)
