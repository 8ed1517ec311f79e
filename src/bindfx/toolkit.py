"""Native toolkit contract and the global toolkit selection.

bindfx never renders anything. It talks to native widgets through the small
Native protocol below; any toolkit whose widgets (or adapters) satisfy it can
be bound. Widget factories called without ``widget=`` build their natives
from the selected toolkit namespace.

Call set_toolkit() once at startup:
    bindfx.set_toolkit(my_toolkit_module)
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

_toolkit = None


@runtime_checkable
class Native(Protocol):
    """Signal contract every native widget (or adapter) provides.

    Callbacks receive the native as their first argument. ``"destroy"`` fires
    exactly once, after which every handler is disconnected.
    """

    def connect(self, signal: str, callback: Callable[..., Any]) -> int: ...

    def disconnect(self, handler_id: int) -> None: ...

    def handler_is_connected(self, handler_id: int) -> bool: ...

    def handler_block(self, handler_id: int) -> None: ...

    def handler_unblock(self, handler_id: int) -> None: ...

    def destroy(self) -> None: ...


@runtime_checkable
class ValueNative(Native, Protocol):
    """A native with a single display value."""

    def get_value(self) -> Any: ...

    def set_value(self, value: Any) -> None: ...


def set_toolkit(toolkit) -> None:
    """Select the namespace widget factories use to construct natives.

    ``toolkit`` must provide the constructors bindfx.headless provides
    (Scale, SpinButton, CheckButton, ToggleButton, Button, ColorButton,
    Entry, TextView, ComboBoxText, Label, ProgressBar). Pass None to restore
    the headless default.
    """
    global _toolkit
    _toolkit = toolkit


def get_toolkit():
    """The selected toolkit namespace (bindfx.headless unless overridden)."""
    if _toolkit is None:
        from bindfx import headless

        return headless
    return _toolkit
