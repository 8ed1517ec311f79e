"""bindfx: two-way bindings between GUI widgets and observable values."""

from importlib.metadata import version as _version

__version__ = _version("bindfx")

from bindfx.errors import (
    BindingError,
    TypeMismatchError,
    ArgumentError,
    ArgumentShapeError,
    RangeViolationError,
)
from bindfx.observable import Observable, ObserverFunction, map_into, mapped
from bindfx.initializer import init_observable_value
from bindfx.binding import bind_widget_to_observable, signal_blocked, on_destroy, release
from bindfx.ranges import StepRange, Interval
from bindfx.coercion import RGB, RGBA
from bindfx.toolkit import set_toolkit, get_toolkit
from bindfx.widgets import (
    Widget,
    InputWidget,
    Slider,
    slider,
    SpinButton,
    spinbutton,
    CyclicSpinButton,
    cyclicspinbutton,
    Checkbox,
    checkbox,
    ToggleButton,
    togglebutton,
    Button,
    button,
    ColorButton,
    colorbutton,
    Textbox,
    textbox,
    Textarea,
    textarea,
    Label,
    label,
    ProgressBar,
    progressbar,
)
from bindfx.dropdown import Dropdown, dropdown
# bindfx.textual is opt-in: import it explicitly

__all__ = [
    "BindingError",
    "TypeMismatchError",
    "ArgumentError",
    "ArgumentShapeError",
    "RangeViolationError",
    "Observable",
    "ObserverFunction",
    "map_into",
    "mapped",
    "init_observable_value",
    "bind_widget_to_observable",
    "signal_blocked",
    "on_destroy",
    "release",
    "StepRange",
    "Interval",
    "RGB",
    "RGBA",
    "set_toolkit",
    "get_toolkit",
    "Widget",
    "InputWidget",
    "Slider",
    "slider",
    "SpinButton",
    "spinbutton",
    "CyclicSpinButton",
    "cyclicspinbutton",
    "Checkbox",
    "checkbox",
    "ToggleButton",
    "togglebutton",
    "Button",
    "button",
    "ColorButton",
    "colorbutton",
    "Textbox",
    "textbox",
    "Textarea",
    "textarea",
    "Label",
    "label",
    "ProgressBar",
    "progressbar",
    "Dropdown",
    "dropdown",
]
