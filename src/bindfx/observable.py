"""Observable values — listenable cells shared between widgets and user code.

Every set() stores the value and synchronously calls each registered
listener in registration order before returning. Listeners registered with
weak=True are held through a weak reference to their ObserverFunction
handle: once the handle is unreachable the listener silently stops firing,
with no explicit unregistration needed.

Values, element types and listener lists live in _anchor, keyed by the
handle's _id.
"""

from __future__ import annotations

import weakref
from typing import Callable, Generic, TypeVar

from bindfx import _anchor
from bindfx.coercion import convert

T = TypeVar("T")
U = TypeVar("U")


class ObserverFunction:
    """Handle for a listener registered with Observable.on().

    Keep it reachable for as long as a weak listener should keep firing.
    """

    __slots__ = ("callback", "weak", "_obs_id", "_disposed", "__weakref__")

    def __init__(self, callback: Callable, obs_id: int, weak: bool) -> None:
        self.callback = callback
        self.weak = weak
        self._obs_id = obs_id
        self._disposed = False

    def __call__(self, value) -> None:
        self.callback(value)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Stop this listener. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        entries = _anchor.listeners.get(self._obs_id)
        if entries is not None:
            _remove_entry(entries, self)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        name = getattr(self.callback, "__name__", repr(self.callback))
        return f"ObserverFunction({name}, {'weak, ' if self.weak else ''}{state})"


def _resolve(entry) -> ObserverFunction | None:
    if isinstance(entry, weakref.ref):
        return entry()
    return entry


def _remove_entry(entries: list, handle: ObserverFunction) -> None:
    for i, entry in enumerate(entries):
        if _resolve(entry) is handle:
            del entries[i]
            return


class Observable(Generic[T]):
    """A single listenable value."""

    __slots__ = ("_id", "_ignore_equal", "__weakref__")

    def __init__(self, value: T, *, eltype=None, ignore_equal_values: bool = False) -> None:
        value = convert(eltype, value)
        self._id = _anchor.new_id()
        self._ignore_equal = ignore_equal_values
        _anchor.eltypes[self._id] = eltype
        _anchor.values[self._id] = value
        _anchor.listeners[self._id] = []
        weakref.finalize(self, _anchor.release, self._id)

    @property
    def eltype(self):
        """Declared element type, or None when unconstrained."""
        return _anchor.eltypes[self._id]

    def get(self) -> T:
        return _anchor.values[self._id]

    def set(self, value: T) -> None:
        """Write a new value and notify every live listener.

        Raises TypeMismatchError if the value cannot be converted to eltype.
        Listener exceptions propagate to the caller.
        """
        value = convert(self.eltype, value)
        if self._ignore_equal and _anchor.values[self._id] == value:
            return
        _anchor.values[self._id] = value
        self._notify(value)

    def set_silent(self, value: T) -> None:
        """Write without notifying listeners."""
        _anchor.values[self._id] = convert(self.eltype, value)

    def notify(self) -> None:
        """Deliver the current value to all listeners again."""
        self._notify(_anchor.values[self._id])

    def _notify(self, value: T) -> None:
        entries = _anchor.listeners[self._id]
        # Snapshot: listeners may register or dispose others while running.
        for entry in list(entries):
            handle = _resolve(entry)
            if handle is None:
                if entry in entries:
                    entries.remove(entry)
                continue
            if handle._disposed:
                continue
            handle.callback(value)

    def on(self, callback: Callable[[T], None], *, weak: bool = False) -> ObserverFunction:
        """Register callback(value) to run on every write. Returns its handle.

        Usage:
            o = Observable(0)
            log = []
            handle = o.on(log.append, weak=True)
            o.set(1)      # log == [1]
            del handle
            o.set(2)      # log == [1]; the weak listener died with its handle
        """
        handle = ObserverFunction(callback, self._id, weak)
        entry = weakref.ref(handle) if weak else handle
        _anchor.listeners[self._id].append(entry)
        return handle

    def off(self, handle: ObserverFunction) -> None:
        """Unregister a listener previously returned by on()."""
        handle.dispose()

    @property
    def listener_count(self) -> int:
        return sum(
            1
            for entry in _anchor.listeners[self._id]
            if (handle := _resolve(entry)) is not None and not handle._disposed
        )

    def __repr__(self) -> str:
        return f"Observable({_anchor.values[self._id]!r})"


def map_into(
    target: Observable[U],
    fn: Callable[[T], U],
    source: Observable[T],
    *,
    weak: bool = False,
) -> ObserverFunction:
    """Keep target equal to fn(source.get()). One-way; target is set immediately.

    Returns the listener handle on source.
    """
    target.set(fn(source.get()))
    return source.on(lambda value: target.set(fn(value)), weak=weak)


def mapped(fn: Callable[[T], U], source: Observable[T], *, eltype=None) -> Observable[U]:
    """Create a new observable that tracks fn(source.get())."""
    target = Observable(fn(source.get()), eltype=eltype)
    map_into(target, fn, source)
    return target
