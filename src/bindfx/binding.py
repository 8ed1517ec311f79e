"""Binding core — keeps a native widget and an observable in sync.

Forward path: the native change signal writes the observable (installed by
each widget factory). Reverse path: bind_widget_to_observable() registers a
weak listener on the observable that writes the widget, with the forward
handler blocked so the write cannot echo back.

// [LAW:single-enforcer] Block/unblock pairing lives in signal_blocked() only.
// [LAW:no-shared-mutable-globals] A widget's auxiliary listeners live in its
//   own preserved list; on_destroy() is the only code that empties it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable

from bindfx.observable import Observable, ObserverFunction

logger = logging.getLogger("bindfx.binding")

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


def default_getter(native) -> Any:
    return native.get_value()


def default_setter(native, value) -> None:
    native.set_value(value)


@contextmanager
def signal_blocked(native, handler_id: int):
    """Suppress one native handler for the duration of the block.

    The handler is unblocked again on every exit path.
    """
    native.handler_block(handler_id)
    try:
        yield
    finally:
        native.handler_unblock(handler_id)


def bind_widget_to_observable(
    native,
    handler_id: int,
    observable: Observable,
    *,
    getter: Getter | None = None,
    setter: Setter | None = None,
) -> ObserverFunction:
    """Update the display of ``native`` whenever ``observable`` changes.

    ``handler_id`` identifies the native handler that writes ``observable``
    from the widget; it is blocked while the display is written. If that
    handler is no longer connected (the widget was destroyed) the update is
    skipped. If the setter raises, the observable is reverted to the value
    the widget was showing and the error is re-raised.

    The listener is weak: keep the returned handle (usually in the widget's
    preserved list) or the widget stops updating.
    """
    getter = getter or default_getter
    setter = setter or default_setter

    def sync_display(value) -> None:
        if not native.handler_is_connected(handler_id):
            logger.debug("Skipping display update for disconnected handler %s on %r", handler_id, native)
            return
        with signal_blocked(native, handler_id):
            current = getter(native)
            try:
                if current != value:
                    setter(native, value)
            except Exception:
                logger.warning("Could not display %r on %r; reverting observable to %r", value, native, current)
                observable.set(current)
                raise

    return observable.on(sync_display, weak=True)


def release(preserved: list) -> None:
    """Dispose every listener handle in ``preserved`` and empty it."""
    for handle in preserved:
        dispose = getattr(handle, "dispose", None)
        if dispose is not None:
            dispose()
    preserved.clear()


def on_destroy(native, preserved: list) -> int:
    """Release ``preserved`` when ``native`` is destroyed. Returns the handler id."""

    def _released(_native, *args) -> None:
        logger.debug("Releasing %d listener(s) of destroyed %r", len(preserved), _native)
        release(preserved)

    return native.connect("destroy", _released)


def gc_preserve(native, obj) -> None:
    """Keep ``obj`` alive for as long as ``native`` is.

    Natives that cannot hold references are left alone; the caller's
    reference to ``obj`` then decides its lifetime.
    """
    keep = getattr(native, "keep_alive", None)
    if keep is not None:
        keep(obj)
