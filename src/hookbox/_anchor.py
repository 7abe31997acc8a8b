"""Data anchor: plain Python structures that hold all host state.

Cell values and their observers, plus each View's component, hook slots and
render bookkeeping, live here keyed by integer ids. StateCell and View
instances are thin handles holding an _id.
"""

import itertools

# Cell state
values: dict[int, object] = {}
observers: dict[int, set] = {}  # cell_id -> set of views

# View state
components: dict[int, tuple] = {}  # view_id -> (component, args, on_render)
dependencies: dict[int, set] = {}  # view_id -> set of cells read in last render
slots: dict[int, list] = {}  # view_id -> hook records in call order
cursors: dict[int, int] = {}
results: dict[int, object] = {}
render_counts: dict[int, int] = {}
rendering: dict[int, bool] = {}
rerender_requested: dict[int, bool] = {}
disposed: dict[int, bool] = {}  # kept after dispose; everything else above is popped
names: dict[int, str] = {}  # kept after dispose, for repr and logging

# ID generation: itertools.count is thread-safe (C-level GIL atomic)
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)
