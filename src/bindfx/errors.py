class BindingError(Exception):
    """Base class for bindfx errors."""


class TypeMismatchError(BindingError, TypeError):
    """Raised when an observable's element type and a value disagree."""


class ArgumentError(BindingError, ValueError):
    """Raised when a widget is constructed or mutated with invalid arguments."""


class ArgumentShapeError(ArgumentError):
    """Raised when string choices and (string, action) pairs are mixed."""


class RangeViolationError(BindingError, ValueError):
    """Raised when a value does not lie within the span of a range."""
