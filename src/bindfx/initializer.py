"""Starting state for a widget: one observable, one value, one source of truth."""

from __future__ import annotations

from bindfx.coercion import compatible, convert
from bindfx.errors import TypeMismatchError
from bindfx.observable import Observable


def init_observable_value(observable=None, value=None, *, eltype=None, default=None):
    """Return a consistent ``(observable, value)`` pair for a new widget.

    - no ``observable``: a new one is created holding ``value`` (or
      ``default`` when ``value`` is None); its eltype is ``eltype`` or, failing
      that, the type of the starting value
    - ``observable`` and no ``value``: the observable's current value is used
    - ``observable`` and ``value``: ``value`` is written into the observable,
      which fires its listeners

    Raises TypeMismatchError when ``eltype`` conflicts with the observable's
    declared element type, or when ``value`` cannot be stored in it. The
    observable is not touched if either check fails.
    """
    if observable is None:
        if value is None:
            value = default
        if eltype is None and value is not None:
            eltype = type(value)
        observable = Observable(value, eltype=eltype)
        return observable, observable.get()

    if not compatible(observable.eltype, eltype):
        raise TypeMismatchError(
            f"observable holds {observable.eltype!r} values but {eltype!r} was requested"
        )
    if value is None:
        return observable, observable.get()
    value = convert(observable.eltype, value)
    if eltype is not None:
        value = convert(eltype, value)
    observable.set(value)
    return observable, value


def owns_observable(supplied, observable) -> bool:
    """Default for ``own``: True when the widget created its own observable."""
    return observable is not supplied
