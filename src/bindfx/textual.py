"""Textual integration for bindfx. Opt-in — requires textual.

Adapters that present mounted Textual widgets through the Native contract,
so the ordinary factories can bind them:

    class Settings(App):
        def compose(self):
            yield BoundInput()

        def on_mount(self) -> None:
            self.port = textbox(8080, widget=TextualEntry(self.query_one(BoundInput)))

Textual delivers Unmount only to the widget's own handlers, so widgets whose
bindings should be released on removal mix in Bindable (the Bound* classes
below already do). Other widgets are released only by destroy().

Native signals map to Textual message types. A handler is dispatched from the
widget's message_signal; blocking it enters widget.prevent(message_type),
so a value written during the block never posts the message at all.

// [LAW:single-enforcer] prevent() entry/exit for a handler happens only in
//   handler_block()/handler_unblock().
// [LAW:locality-or-seam] Only this module imports textual; the binding core never does.
"""

from __future__ import annotations

import itertools
import logging
from contextlib import ExitStack
from typing import Any, Callable

from textual.widgets import Button, Checkbox, Input, Label, Switch

logger = logging.getLogger("bindfx.textual")

_handler_ids = itertools.count(1)

# Live adapters by id(widget); Bindable._on_unmount tears them down.
_adapters: dict[int, list[TextualWidget]] = {}


class Bindable:
    """Mixin for Textual widget classes whose adapters end with the widget.

    Place it before the Textual base: ``class MyInput(Bindable, Input)``.
    """

    def _on_unmount(self) -> None:
        for adapter in list(_adapters.get(id(self), ())):
            adapter._teardown()


class TextualWidget:
    """Native adapter for one Textual widget.

    ``signals`` maps native signal names to the Textual message types that
    emit them. The widget must be mounted: Textual only lets running nodes
    subscribe to message_signal.
    """

    def __init__(self, widget, *, signals: dict[str, type], value_attr: str = "value") -> None:
        self.widget = widget
        self._signals = dict(signals)
        self._value_attr = value_attr
        self._handlers: dict[int, tuple[str, Callable]] = {}
        self._blocks: dict[int, list[ExitStack]] = {}
        self._destroyed = False
        self._kept: list = []
        widget.message_signal.subscribe(widget, self._dispatch, immediate=True)
        _adapters.setdefault(id(widget), []).append(self)
        if not isinstance(widget, Bindable):
            logger.warning("%r is not Bindable; its bindings are released only by destroy()", widget)

    # --- Value ---

    def get_value(self) -> Any:
        return getattr(self.widget, self._value_attr)

    def set_value(self, value: Any) -> None:
        setattr(self.widget, self._value_attr, value)

    # --- Signals ---

    def connect(self, signal: str, callback: Callable[..., Any]) -> int:
        if signal != "destroy" and signal not in self._signals:
            raise ValueError(f"{type(self.widget).__name__} has no signal {signal!r}")
        if self._destroyed:
            raise RuntimeError(f"cannot connect {signal!r} on destroyed {self!r}")
        handler_id = next(_handler_ids)
        self._handlers[handler_id] = (signal, callback)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)
        for stack in self._blocks.pop(handler_id, []):
            stack.close()

    def handler_is_connected(self, handler_id: int) -> bool:
        return handler_id in self._handlers and self.widget.is_attached

    def handler_block(self, handler_id: int) -> None:
        try:
            signal, _ = self._handlers[handler_id]
        except KeyError:
            raise ValueError(f"no handler {handler_id} connected on {self!r}") from None
        stack = ExitStack()
        if signal in self._signals:
            stack.enter_context(self.widget.prevent(self._signals[signal]))
        self._blocks.setdefault(handler_id, []).append(stack)

    def handler_unblock(self, handler_id: int) -> None:
        stacks = self._blocks.get(handler_id)
        if stacks:
            stacks.pop().close()

    def _dispatch(self, message) -> None:
        if self._destroyed:
            return
        for handler_id, (signal, callback) in list(self._handlers.items()):
            message_type = self._signals.get(signal)
            if message_type is None or not isinstance(message, message_type):
                continue
            if handler_id in self._handlers:
                callback(self, message)

    # --- Lifetime ---

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def _teardown(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        live = _adapters.get(id(self.widget), [])
        if self in live:
            live.remove(self)
        if not live:
            _adapters.pop(id(self.widget), None)
        for signal, callback in list(self._handlers.values()):
            if signal == "destroy":
                callback(self)
        for handler_id in list(self._handlers):
            self.disconnect(handler_id)
        self._kept.clear()
        logger.debug("Tore down adapter for %r", self.widget)

    def destroy(self) -> None:
        """Fire "destroy" handlers, then remove the widget from the DOM."""
        if self._destroyed:
            return
        self._teardown()
        self.widget.remove()

    def keep_alive(self, obj) -> None:
        if not self._destroyed:
            self._kept.append(obj)

    def __repr__(self) -> str:
        state = " destroyed" if self._destroyed else ""
        return f"<{type(self).__name__} {self.widget!r}{state}>"


class TextualEntry(TextualWidget):
    """An ``Input``: "changed" on every edit, "activate" on Enter."""

    def __init__(self, widget) -> None:
        kind = type(widget)
        super().__init__(widget, signals={"changed": kind.Changed, "activate": kind.Submitted})

    def get_text(self) -> str:
        return self.widget.value

    def set_text(self, text: str) -> None:
        self.widget.value = text


class TextualToggle(TextualWidget):
    """A ``Checkbox``, ``RadioButton`` or ``Switch``: "toggled" on change."""

    def __init__(self, widget) -> None:
        super().__init__(widget, signals={"toggled": type(widget).Changed})

    def get_active(self) -> bool:
        return bool(self.widget.value)

    def set_active(self, active: bool) -> None:
        self.widget.value = bool(active)


class TextualButton(TextualWidget):
    """A ``Button``: "clicked" when pressed."""

    def __init__(self, widget) -> None:
        super().__init__(widget, signals={"clicked": type(widget).Pressed}, value_attr="label")

    def click(self) -> None:
        self.widget.press()


class TextualLabel(TextualWidget):
    """A ``Label`` or ``Static``; text is pushed with update()."""

    def __init__(self, widget, text: str = "") -> None:
        super().__init__(widget, signals={})
        self._text = text

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text
        self.widget.update(text)


class BoundInput(Bindable, Input):
    pass


class BoundCheckbox(Bindable, Checkbox):
    pass


class BoundSwitch(Bindable, Switch):
    pass


class BoundButton(Bindable, Button):
    pass


class BoundLabel(Bindable, Label):
    pass
