"""Bound widgets — a native widget plus the observable it displays.

Each factory follows the same steps:
    1. init_observable_value() settles the starting (observable, value)
    2. the native is created (or reconfigured) and shows that value
    3. the forward handler (native signal -> observable) is connected
    4. bind_widget_to_observable() installs the guarded reverse listener
    5. with own=True, destroying the native releases the listeners

own defaults to True only when the factory created the observable itself;
an observable you pass in is never torn down with one of its widgets.

Usage:
    s = slider(range(0, 11))
    s.get()                 # 5
    s.widget.slide_to(8)    # user drags
    s.get()                 # 8
    s.set(2)                # programmatic; the native now shows 2.0
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from bindfx.binding import bind_widget_to_observable, gc_preserve, on_destroy
from bindfx.coercion import RGB, format_value, from_rgba, nearest, round_to, to_rgba, try_parse
from bindfx.errors import ArgumentError, RangeViolationError
from bindfx.initializer import init_observable_value, owns_observable
from bindfx.observable import Observable
from bindfx.ranges import as_interval, as_step_range, range_eltype
from bindfx.toolkit import get_toolkit

T = TypeVar("T")

logger = logging.getLogger("bindfx.widgets")

# Marks a text entry that did not parse.
_INVALID = object()


class Widget(Generic[T]):
    """An observable and the native widget that displays it."""

    def __init__(self, observable: Observable[T], widget, preserved: list) -> None:
        self.observable = observable
        self.widget = widget
        self.preserved = preserved
        gc_preserve(widget, self)

    def get(self) -> T:
        return self.observable.get()

    def set(self, value: T) -> None:
        self.observable.set(value)

    def destroy(self) -> None:
        self.widget.destroy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.observable.get()!r})"


class InputWidget(Widget[T]):
    """A widget the user can change; ``handler_id`` is its forward handler."""

    def __init__(self, observable: Observable[T], widget, handler_id: int, preserved: list) -> None:
        super().__init__(observable, widget, preserved)
        self.handler_id = handler_id


def _finish(native, handler_id, observable, *, own, syncsig=True, getter=None, setter=None) -> list:
    """Install the reverse listener and, if owned, the destroy cleanup."""
    preserved = []
    if syncsig:
        preserved.append(
            bind_widget_to_observable(native, handler_id, observable, getter=getter, setter=setter)
        )
    if own:
        on_destroy(native, preserved)
    return preserved


# ─── Ranged numeric widgets ──────────────────────────────────────────────────


class _RangedInput(InputWidget[T]):
    def __init__(self, observable, widget, handler_id, preserved, rng, span) -> None:
        super().__init__(observable, widget, handler_id, preserved)
        self.range = rng
        self._span = span

    def set_range(self, rng, value=None) -> None:
        """Reassign the range, and optionally the value, in one step.

        Raises RangeViolationError (changing nothing) if the value, by default
        the current one, is not within the span of the new range.
        """
        rng = as_step_range(rng)
        if value is None:
            value = self.get()
        if not rng.first <= value <= rng.last:
            raise RangeViolationError(f"{value} is not within the span of {rng}")
        self._span[:] = [rng.first, rng.last]
        self.widget.configure(lower=rng.first, upper=rng.last, step=rng.step, value=value)
        self.range = rng


class Slider(_RangedInput[T]):
    pass


class SpinButton(_RangedInput[T]):
    pass


def _check_span(value, span) -> None:
    if value is not None and not span[0] <= value <= span[1]:
        raise RangeViolationError(f"{value} is not within {span[0]}..{span[1]}")


def _ranged(native_cls, rng, bounds, value, default, widget, observable, orientation, syncsig, own):
    rng = as_step_range(rng)
    eltype = range_eltype(rng)
    # Mutable so set_range() can move the bounds the setter checks.
    span = list(bounds(rng))
    _check_span(value, span)
    supplied = observable
    observable, value = init_observable_value(observable, value, eltype=eltype, default=default(rng))
    if own is None:
        own = owns_observable(supplied, observable)
    _check_span(value, span)
    if widget is None:
        widget = native_cls(span[0], span[1], rng.step, orientation=orientation)
    else:
        widget.configure(lower=span[0], upper=span[1], step=rng.step)
    widget.set_value(value)

    def on_value_changed(w, *args) -> None:
        observable.set(round_to(eltype, w.get_value()))

    def get_value(w):
        return round_to(eltype, w.get_value())

    def set_checked_value(w, val) -> None:
        _check_span(val, span)
        w.set_value(val)

    handler_id = widget.connect("value-changed", on_value_changed)
    preserved = _finish(
        widget, handler_id, observable, own=own, syncsig=syncsig,
        getter=get_value, setter=set_checked_value,
    )
    return rng, span, observable, value, widget, handler_id, preserved


def _span(rng):
    return rng.first, rng.last


def slider(rng, value=None, *, widget=None, observable=None, orientation="horizontal",
           syncsig=True, own=None) -> Slider:
    """Create a slider over ``rng`` (a range or StepRange).

    ``value`` defaults to the middle element of ``rng``. Native values are
    rounded to the range's element type before reaching the observable.
    """
    rng, span, observable, _, widget, handler_id, preserved = _ranged(
        get_toolkit().Scale, rng, _span, value, lambda r: r.median_element(),
        widget, observable, orientation, syncsig, own,
    )
    return Slider(observable, widget, handler_id, preserved, rng, span)


def spinbutton(rng, value=None, *, widget=None, observable=None, orientation="horizontal",
               syncsig=True, own=None) -> SpinButton:
    """Create a spin button over ``rng``; ``value`` defaults to its start."""
    rng, span, observable, _, widget, handler_id, preserved = _ranged(
        get_toolkit().SpinButton, rng, _span, value, lambda r: r.first,
        widget, observable, orientation, syncsig, own,
    )
    return SpinButton(observable, widget, handler_id, preserved, rng, span)


class CyclicSpinButton(InputWidget[T]):
    def __init__(self, observable, widget, handler_id, preserved, rng, carry_up) -> None:
        super().__init__(observable, widget, handler_id, preserved)
        self.range = rng
        self.carry_up = carry_up


def cyclicspinbutton(rng, carry_up: Observable[bool], value=None, *, widget=None, observable=None,
                     orientation="horizontal", syncsig=True, own=None) -> CyclicSpinButton:
    """Create a spin button that wraps around ``rng``.

    The native accepts one step past each end. A value above the range wraps
    to its start and then sets ``carry_up`` to True; a value below wraps to
    its end and then sets ``carry_up`` to False. Listeners on ``carry_up``
    therefore already see the wrapped value.
    """
    rng, _, observable, value, widget, handler_id, preserved = _ranged(
        get_toolkit().SpinButton, rng, lambda r: _span(r.widened(1)), value, lambda r: r.first,
        widget, observable, orientation, syncsig, own,
    )
    sync_display = preserved[0].callback if syncsig else None

    def wrap(val) -> None:
        if val > rng.last:
            wrapped, carry = rng.first, True
        elif val < rng.first:
            wrapped, carry = rng.last, False
        else:
            return
        logger.debug("Wrapping %r to %r (carry %s)", val, wrapped, carry)
        observable.set_silent(wrapped)
        if sync_display is not None:
            sync_display(wrapped)
        carry_up.set(carry)

    preserved.append(observable.on(wrap, weak=True))
    observable.set(value)
    return CyclicSpinButton(observable, widget, handler_id, preserved, rng, carry_up)


# ─── Toggles, buttons, colours ───────────────────────────────────────────────


class Checkbox(InputWidget[bool]):
    pass


class ToggleButton(InputWidget[bool]):
    pass


def _toggle(native_cls, value, widget, observable, label, own):
    supplied = observable
    observable, value = init_observable_value(observable, value, eltype=bool, default=False)
    if own is None:
        own = owns_observable(supplied, observable)
    if widget is None:
        widget = native_cls(label)
    widget.set_active(value)

    def on_toggled(w, *args) -> None:
        observable.set(w.get_active())

    handler_id = widget.connect("toggled", on_toggled)
    preserved = _finish(
        widget, handler_id, observable, own=own,
        getter=lambda w: w.get_active(), setter=lambda w, v: w.set_active(v),
    )
    return observable, widget, handler_id, preserved


def checkbox(value=None, *, widget=None, observable=None, label="", own=None) -> Checkbox:
    """Create a check box; ``value`` defaults to False (or the observable's value)."""
    return Checkbox(*_toggle(get_toolkit().CheckButton, value, widget, observable, label, own))


def togglebutton(value=None, *, widget=None, observable=None, label="", own=None) -> ToggleButton:
    """Create a toggle button; ``value`` defaults to False (or the observable's value)."""
    return ToggleButton(*_toggle(get_toolkit().ToggleButton, value, widget, observable, label, own))


class Button(InputWidget[None]):
    pass


def button(label=None, *, widget=None, observable=None, own=None) -> Button:
    """Create a push button; every click writes None to the observable.

    Listeners on ``observable`` therefore fire once per click.
    """
    supplied = observable
    if observable is None:
        observable = Observable(None)
    if own is None:
        own = owns_observable(supplied, observable)
    if widget is None:
        widget = get_toolkit().Button(label)

    def on_clicked(w, *args) -> None:
        observable.set(None)

    handler_id = widget.connect("clicked", on_clicked)
    preserved = []
    if own:
        on_destroy(widget, preserved)
    return Button(observable, widget, handler_id, preserved)


class ColorButton(InputWidget[T]):
    pass


def colorbutton(color=None, *, widget=None, observable=None, own=None) -> ColorButton:
    """Create a colour button; ``color`` (RGB or RGBA) defaults to black.

    The observable keeps the colour type of the starting value.
    """
    supplied = observable
    observable, color = init_observable_value(observable, color, default=RGB(0.0, 0.0, 0.0))
    if own is None:
        own = owns_observable(supplied, observable)
    kind = type(color)

    def get_color(w):
        return from_rgba(w.get_rgba(), kind)

    def set_color(w, val) -> None:
        w.set_rgba(to_rgba(val))

    if widget is None:
        widget = get_toolkit().ColorButton(to_rgba(color))
    else:
        set_color(widget, color)

    def on_color_set(w, *args) -> None:
        observable.set(get_color(w))

    handler_id = widget.connect("color-set", on_color_set)
    preserved = _finish(widget, handler_id, observable, own=own, getter=get_color, setter=set_color)
    return ColorButton(observable, widget, handler_id, preserved)


# ─── Text ────────────────────────────────────────────────────────────────────


class Textbox(InputWidget[T]):
    def __init__(self, observable, widget, handler_id, preserved, rng) -> None:
        super().__init__(observable, widget, handler_id, preserved)
        self.range = rng


def _read_entry(w, observable, eltype, rng):
    """Forward-path value of an entry, repairing its text when needed.

    Text that does not parse is replaced by the observable's current value
    and _INVALID is returned. Parsed values are snapped onto ``rng``; the text
    is rewritten if snapping changed the value.
    """
    text = w.get_text()
    if eltype is str:
        return text
    val = try_parse(eltype, text)
    if val is None:
        restored = observable.get()
        logger.debug("Could not parse %r as %s; restoring %r", text, eltype.__name__, restored)
        w.set_text(format_value(restored))
        return _INVALID
    nval = nearest(val, rng)
    if nval != val:
        w.set_text(format_value(nval))
    return nval


def textbox(value=None, *, eltype=None, widget=None, range=None, observable=None,
            syncsig=True, own=None, signal="activate") -> Textbox:
    """Create a text entry bound to a ``str`` or a parsed value.

    ``eltype`` defaults to the type of ``value``, then the observable's element
    type, then ``str``. ``range`` (numeric entries only) snaps entered values
    onto its grid and rejects programmatic values outside it. ``signal``
    selects the native signal that commits the text ("activate" or, for
    string entries, "changed").
    """
    if eltype is None:
        if value is not None:
            eltype = type(value)
        elif observable is not None and isinstance(observable.eltype, type):
            eltype = observable.eltype
        else:
            eltype = str
    rng = as_step_range(range) if range is not None else None
    if issubclass(eltype, str) and rng is not None:
        raise ArgumentError("a range cannot be set on a string textbox")
    if not issubclass(eltype, str) and signal == "changed":
        raise ArgumentError(f"the 'changed' signal is not supported for a {eltype.__name__} textbox")

    if issubclass(eltype, str):
        default = ""
    else:
        default = rng.first if rng is not None else eltype()
    supplied = observable
    observable, value = init_observable_value(observable, value, eltype=eltype, default=default)
    if own is None:
        own = owns_observable(supplied, observable)
    if widget is None:
        widget = get_toolkit().Entry()
    widget.set_text(format_value(value))

    def on_commit(w, *args):
        val = _read_entry(w, observable, eltype, rng)
        if val is not _INVALID:
            observable.set(val)
        return False

    handler_id = widget.connect(signal, on_commit)

    def get_entry(w):
        text = w.get_text()
        return text if eltype is str else try_parse(eltype, text)

    def set_entry(w, val) -> None:
        w.set_text(format_value(val))

    def set_checked_entry(w, val) -> None:
        if val not in rng:
            raise RangeViolationError(f"{val} is not within {rng}")
        set_entry(w, val)

    preserved = _finish(
        widget, handler_id, observable, own=own, syncsig=syncsig,
        getter=get_entry, setter=set_entry if rng is None else set_checked_entry,
    )
    return Textbox(observable, widget, handler_id, preserved, rng)


class Textarea(InputWidget[str]):
    def __init__(self, observable, widget, buffer, handler_id, preserved) -> None:
        super().__init__(observable, widget, handler_id, preserved)
        self.buffer = buffer


def textarea(value=None, *, widget=None, observable=None, syncsig=True, own=None) -> Textarea:
    """Create a multi-line text area; the observable updates as the text changes."""
    supplied = observable
    observable, value = init_observable_value(observable, value, eltype=str, default="")
    if own is None:
        own = owns_observable(supplied, observable)
    if widget is None:
        widget = get_toolkit().TextView()
    buf = widget.buffer
    buf.set_text(value)

    def on_changed(b, *args) -> None:
        observable.set(b.get_text())

    handler_id = buf.connect("changed", on_changed)
    # The handler lives on the buffer; cleanup follows the view.
    preserved = _finish(
        buf, handler_id, observable, own=False, syncsig=syncsig,
        getter=lambda b: b.get_text(), setter=lambda b, v: b.set_text(v),
    )
    if own:
        on_destroy(widget, preserved)
    return Textarea(observable, widget, buf, handler_id, preserved)


# ─── Output widgets ──────────────────────────────────────────────────────────


class Label(Widget[str]):
    pass


def label(value=None, *, widget=None, observable=None, syncsig=True, own=None) -> Label:
    """Create a label showing ``value`` as a string."""
    if value is not None:
        value = str(value)
    supplied = observable
    observable, value = init_observable_value(observable, value, eltype=str, default="")
    if own is None:
        own = owns_observable(supplied, observable)
    if widget is None:
        widget = get_toolkit().Label(str(value))
    else:
        widget.set_text(str(value))
    preserved = []
    if syncsig:
        preserved.append(observable.on(lambda val: widget.set_text(str(val)), weak=True))
    if own:
        on_destroy(widget, preserved)
    return Label(observable, widget, preserved)


class ProgressBar(Widget[T]):
    def __init__(self, observable, widget, preserved, interval) -> None:
        super().__init__(observable, widget, preserved)
        self.interval = interval


def progressbar(interval, *, widget=None, observable=None, syncsig=True, own=None) -> ProgressBar:
    """Create a progress bar showing where the value sits in ``interval``.

    ``interval`` is an Interval, a range, or a ``(lo, hi)`` pair; a new
    observable starts at its lower end.

    Usage:
        pb = progressbar((1, 10))
        for i in range(1, 11):
            pb.set(i)       # fraction goes 0.0 ... 1.0
    """
    interval = as_interval(interval)
    eltype = int if isinstance(interval.lo, int) and isinstance(interval.hi, int) else float
    supplied = observable
    observable, value = init_observable_value(observable, None, eltype=eltype, default=interval.lo)
    if own is None:
        own = owns_observable(supplied, observable)
    if widget is None:
        widget = get_toolkit().ProgressBar()
    widget.set_fraction(interval.fraction(value))
    preserved = []
    if syncsig:
        preserved.append(observable.on(lambda val: widget.set_fraction(interval.fraction(val)), weak=True))
    if own:
        on_destroy(widget, preserved)
    return ProgressBar(observable, widget, preserved, interval)
