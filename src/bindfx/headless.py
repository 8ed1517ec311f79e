"""Headless toolkit — in-memory natives that honour the Native contract.

These natives render nothing; they keep their display state in memory and
emit signals synchronously the way GTK widgets do: programmatic changes to a
value emit the widget's change signal, blocked handlers are skipped, and
"destroy" fires once before every handler is disconnected. They are the
default toolkit and make bindings testable without a display.

User interaction is simulated with the verb methods: Scale.slide_to(),
SpinButton.spin(), CheckButton.click(), Entry.type_text()/activate(),
ComboBoxText.select(), ColorButton.choose().
"""

from __future__ import annotations

import itertools
from typing import Any, Callable

from bindfx.coercion import RGBA

_handler_ids = itertools.count(1)


class _Handler:
    __slots__ = ("signal", "callback", "blocked")

    def __init__(self, signal: str, callback: Callable) -> None:
        self.signal = signal
        self.callback = callback
        self.blocked = 0


class NativeWidget:
    """Base native: signal registry, handler blocking, destruction."""

    def __init__(self) -> None:
        self._handlers: dict[int, _Handler] = {}
        self._destroyed = False
        self._kept: list = []

    # --- Signals ---

    def connect(self, signal: str, callback: Callable[..., Any]) -> int:
        """Call callback(native, *args) whenever signal is emitted. Returns a handler id."""
        if self._destroyed:
            raise RuntimeError(f"cannot connect {signal!r} on destroyed {self!r}")
        handler_id = next(_handler_ids)
        self._handlers[handler_id] = _Handler(signal, callback)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)

    def handler_is_connected(self, handler_id: int) -> bool:
        return handler_id in self._handlers

    def handler_block(self, handler_id: int) -> None:
        """Block a handler. Blocks nest; each needs a matching unblock."""
        try:
            self._handlers[handler_id].blocked += 1
        except KeyError:
            raise ValueError(f"no handler {handler_id} connected on {self!r}") from None

    def handler_unblock(self, handler_id: int) -> None:
        handler = self._handlers.get(handler_id)
        if handler is not None and handler.blocked > 0:
            handler.blocked -= 1

    def handler_is_blocked(self, handler_id: int) -> bool:
        handler = self._handlers.get(handler_id)
        return handler is not None and handler.blocked > 0

    def emit(self, signal: str, *args) -> None:
        """Invoke every unblocked handler of signal, in connection order."""
        for handler_id, handler in list(self._handlers.items()):
            if handler.signal != signal or handler.blocked:
                continue
            # A previous handler may have disconnected this one.
            if handler_id in self._handlers:
                handler.callback(self, *args)

    # --- Lifetime ---

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        """Emit "destroy" once, then disconnect everything."""
        if self._destroyed:
            return
        self._destroyed = True
        self.emit("destroy")
        self._handlers.clear()
        self._kept.clear()

    def keep_alive(self, obj) -> None:
        """Hold a reference to obj until this native is destroyed."""
        if not self._destroyed:
            self._kept.append(obj)

    def __repr__(self) -> str:
        state = " destroyed" if self._destroyed else ""
        return f"<{type(self).__name__}{state}>"


class _RangeWidget(NativeWidget):
    """A native numeric value bounded by [lower, upper] (GTK adjustment semantics)."""

    def __init__(
        self,
        lower: float = 0.0,
        upper: float = 100.0,
        step: float = 1.0,
        value: float | None = None,
        *,
        orientation: str = "horizontal",
    ) -> None:
        super().__init__()
        self._lower = float(lower)
        self._upper = float(upper)
        self._step = float(step)
        self._value = self._clamp(lower if value is None else value)
        self.orientation = "vertical" if orientation[:1].lower() == "v" else "horizontal"

    @property
    def lower(self) -> float:
        return self._lower

    @property
    def upper(self) -> float:
        return self._upper

    @property
    def step(self) -> float:
        return self._step

    def _clamp(self, value) -> float:
        return float(min(max(value, self._lower), self._upper))

    def get_value(self) -> float:
        return self._value

    def set_value(self, value) -> None:
        value = self._clamp(value)
        if value != self._value:
            self._value = value
            self.emit("value-changed")

    def configure(self, *, lower=None, upper=None, step=None, value=None) -> None:
        """Reset bounds and step together, then (re)apply the value."""
        if lower is not None:
            self._lower = float(lower)
        if upper is not None:
            self._upper = float(upper)
        if step is not None:
            self._step = float(step)
        self.set_value(self._value if value is None else value)


class Scale(_RangeWidget):
    def slide_to(self, value) -> None:
        self.set_value(value)


class SpinButton(_RangeWidget):
    def spin(self, steps: int = 1) -> None:
        """Press the up (positive) or down (negative) arrow ``abs(steps)`` times."""
        self.set_value(self._value + steps * self._step)


class _Toggle(NativeWidget):
    def __init__(self, label: str = "", active: bool = False) -> None:
        super().__init__()
        self.label = label
        self._active = bool(active)

    def get_active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        active = bool(active)
        if active != self._active:
            self._active = active
            self.emit("toggled")

    get_value = get_active
    set_value = set_active

    def click(self) -> None:
        self.set_active(not self._active)


class CheckButton(_Toggle):
    pass


class ToggleButton(_Toggle):
    pass


class Button(NativeWidget):
    def __init__(self, label: str | None = None) -> None:
        super().__init__()
        self.label = label

    def click(self) -> None:
        self.emit("clicked")


class ColorButton(NativeWidget):
    """Emits "color-set" only when the user picks a colour, like GtkColorButton."""

    def __init__(self, rgba: RGBA | None = None) -> None:
        super().__init__()
        self._rgba = rgba or RGBA(0.0, 0.0, 0.0, 1.0)

    def get_rgba(self) -> RGBA:
        return self._rgba

    def set_rgba(self, rgba: RGBA) -> None:
        self._rgba = RGBA(*rgba)

    def choose(self, rgba: RGBA) -> None:
        self.set_rgba(rgba)
        self.emit("color-set")


class Entry(NativeWidget):
    def __init__(self, text: str = "") -> None:
        super().__init__()
        self._text = text

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        if text != self._text:
            self._text = text
            self.emit("changed")

    get_value = get_text
    set_value = set_text

    def type_text(self, text: str) -> None:
        self.set_text(text)

    def activate(self) -> None:
        """Simulate pressing Enter."""
        self.emit("activate")


class TextBuffer(NativeWidget):
    def __init__(self, text: str = "") -> None:
        super().__init__()
        self._text = text

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        if text != self._text:
            self._text = text
            self.emit("changed")

    get_value = get_text
    set_value = set_text


class TextView(NativeWidget):
    def __init__(self, buffer: TextBuffer | None = None) -> None:
        super().__init__()
        self.buffer = buffer or TextBuffer()


class ComboBoxText(NativeWidget):
    """A list of strings with one (or no, -1) active entry."""

    def __init__(self) -> None:
        super().__init__()
        self._items: list[str] = []
        self._active = -1

    @property
    def items(self) -> list[str]:
        return list(self._items)

    def append_text(self, text: str) -> None:
        self._items.append(text)

    def remove_all(self) -> None:
        self._items.clear()
        self.set_active(-1)

    def get_active(self) -> int:
        return self._active

    def set_active(self, index: int) -> None:
        if not -1 <= index < len(self._items):
            raise IndexError(f"no item {index} in {self!r}")
        if index != self._active:
            self._active = index
            self.emit("changed")

    def get_active_text(self) -> str | None:
        return self._items[self._active] if self._active >= 0 else None

    def select(self, text: str) -> None:
        self.set_active(self._items.index(text))


class Label(NativeWidget):
    def __init__(self, text: str = "") -> None:
        super().__init__()
        self._text = text

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text


class ProgressBar(NativeWidget):
    def __init__(self) -> None:
        super().__init__()
        self._fraction = 0.0

    def get_fraction(self) -> float:
        return self._fraction

    def set_fraction(self, fraction: float) -> None:
        self._fraction = float(min(max(fraction, 0.0), 1.0))
