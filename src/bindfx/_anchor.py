"""Data anchor — plain Python structures that hold all observable state.

This module stores the raw data for every Observable: its current value,
its declared element type, and its listener list. Observable instances are
thin handles holding an _id; the entries here are released when the handle
is garbage-collected.
"""

import itertools

# Observable state
values: dict[int, object] = {}
eltypes: dict[int, object] = {}
listeners: dict[int, list] = {}  # obs_id -> [ObserverFunction | weakref to one]

# Ids are never reused
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def release(obs_id: int) -> None:
    values.pop(obs_id, None)
    eltypes.pop(obs_id, None)
    listeners.pop(obs_id, None)
