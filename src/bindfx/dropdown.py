"""Dropdown — a string choice bound to an observable, with optional actions.

Choices are either all strings or all ``(string, action)`` pairs (a dict is
read as pairs). For pairs, ``mapped`` is an observable that follows the
action of the selected string:

    dd = dropdown({"turn red": make_red, "turn green": make_green})
    dd.mapped.on(lambda action: action(img))
    dd.set("turn green")    # calls make_green(img)

The action does not fire for the starting value; call ``dd.observable.notify()``
after registering if that is wanted. For string choices ``mapped`` is None.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from bindfx.binding import bind_widget_to_observable, on_destroy
from bindfx.errors import ArgumentError, ArgumentShapeError
from bindfx.initializer import init_observable_value, owns_observable
from bindfx.observable import Observable, map_into
from bindfx.toolkit import get_toolkit
from bindfx.widgets import InputWidget

logger = logging.getLogger("bindfx.dropdown")

OPTIONAL_STR = (str, type(None))


def _normalize(choices) -> list:
    if isinstance(choices, Mapping):
        return list(choices.items())
    return list(choices)


def _is_pair(choice) -> bool:
    return isinstance(choice, tuple) and len(choice) == 2 and isinstance(choice[0], str)


def _all_strings(choices: list) -> bool:
    """True for string choices, False for pairs; raises for anything mixed."""
    if all(isinstance(c, str) for c in choices):
        return True
    if all(_is_pair(c) for c in choices):
        return False
    raise ArgumentShapeError(
        f"all choices must either be strings or (string, action) pairs, got {choices!r}"
    )


def _display(choice) -> str:
    return choice if isinstance(choice, str) else choice[0]


def _check_unique(names: list[str], existing=()) -> None:
    seen = set(existing)
    for name in names:
        if name in seen:
            raise ArgumentError(f"duplicate choice {name!r}")
        seen.add(name)


class Dropdown(InputWidget):
    """A bound dropdown. ``str2int`` maps each display string to its native index."""

    def __init__(self, observable, mapped, widget, str2int, actions, handler_id, preserved) -> None:
        super().__init__(observable, widget, handler_id, preserved)
        self.mapped = mapped
        self.str2int = str2int
        self.actions = actions

    @property
    def choices(self) -> list[str]:
        return list(self.str2int)

    @property
    def has_actions(self) -> bool:
        return self.mapped is not None

    def append(self, choices) -> Dropdown:
        """Add choices of the same shape the dropdown was created with.

        Raises ArgumentShapeError for the other shape and ArgumentError for a
        display string that is already present; nothing is added in either case.
        """
        choices = _normalize(choices)
        if not choices:
            return self
        if _all_strings(choices) == self.has_actions:
            expected = "(string, action) pairs" if self.has_actions else "strings"
            raise ArgumentShapeError(f"only {expected} may be added to this dropdown, got {choices!r}")
        names = [_display(c) for c in choices]
        _check_unique(names, existing=self.str2int)
        k = len(self.str2int)
        for choice, name in zip(choices, names):
            self.widget.append_text(name)
            self.str2int[name] = k
            if self.has_actions:
                self.actions[name] = choice[1]
            k += 1
        return self

    def clear(self) -> Dropdown:
        """Remove every choice; the observable becomes None.

        Raises ArgumentError when the observable cannot hold None.
        """
        eltype = self.observable.eltype
        if eltype is not None and not isinstance(None, eltype):
            raise ArgumentError(f"clear() needs an observable that admits None, not {eltype!r}")
        self.str2int.clear()
        self.actions.clear()
        self.widget.remove_all()
        if self.mapped is not None:
            self.mapped.set(None)
        return self


def dropdown(choices, value=None, *, widget=None, observable=None, own=None) -> Dropdown:
    """Create a dropdown over ``choices``.

    The selection starts at ``value`` (which must be a choice), else at the
    observable's value if it is a choice, else at the first choice.
    """
    choices = _normalize(choices)
    all_strings = _all_strings(choices)
    names = [_display(c) for c in choices]
    _check_unique(names)
    if value is not None and value not in names:
        raise ArgumentError(f"{value!r} is not one of the choices {names!r}")

    supplied = observable
    observable, value = init_observable_value(observable, value, eltype=OPTIONAL_STR)
    if own is None:
        own = owns_observable(supplied, observable)
    if widget is None:
        widget = get_toolkit().ComboBoxText()
    widget.remove_all()
    if names and value not in names:
        value = names[0]
        observable.set(value)

    str2int: dict[str, int] = {}
    for k, name in enumerate(names):
        widget.append_text(name)
        str2int[name] = k

    def get_active(w):
        return w.get_active_text()

    def set_active(w, val) -> None:
        if val is None:
            w.set_active(-1)
        elif val in str2int:
            w.set_active(str2int[val])
        else:
            raise ArgumentError(f"{val!r} is not one of the choices {list(str2int)!r}")

    set_active(widget, value if value in str2int else None)

    def on_changed(w, *args) -> None:
        observable.set(get_active(w))

    handler_id = widget.connect("changed", on_changed)
    preserved = [
        bind_widget_to_observable(widget, handler_id, observable, getter=get_active, setter=set_active)
    ]

    mapped = None
    actions: dict = {}
    if not all_strings:
        actions.update(choices)
        mapped = Observable(None)
        preserved.append(
            map_into(mapped, lambda val: actions.get(val) if val is not None else None, observable, weak=True)
        )
    if own:
        on_destroy(widget, preserved)
    logger.debug("Dropdown with %d choice(s), starting at %r", len(names), value)
    return Dropdown(observable, mapped, widget, str2int, actions, handler_id, preserved)
