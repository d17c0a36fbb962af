"""
Covenant faults and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the engine
  can surface. Codes are grouped by phase (model build vs. binding) so logs and
  searches stay predictable.
- CommandException: base type carrying a stable message plus read-only options
  (code, title, hint and the offending member/token), able to render itself
  through rich.
- InitializationError / BindingError: the two phases a fault can belong to.

Propagation
- Faults are always raised synchronously to the caller of build() or bind().
  The engine never logs, swallows or retries them.

Integration
- Host applications may relabel codes through a __codes__ mapping, restyle the
  rendering through __styles__ and name the program through __prog__, all read
  from __main__ at render time.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by phase)
    - model build (112xx)
      • NAMING_CONFLICT, INVALID_ANNOTATION_PLACEMENT, UNSUPPORTED_TYPE
    - binding (111xx)
      • UNKNOWN_OPTION, OPTION_VALUE_REQUIRED, CONVERSION_ERROR

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- binding errors (111xx) ---
    UNKNOWN_OPTION               = 11112
    OPTION_VALUE_REQUIRED        = 11117
    CONVERSION_ERROR             = 11126

    # --- model build errors (112xx) ---
    NAMING_CONFLICT              = 11201
    INVALID_ANNOTATION_PLACEMENT = 11202
    UNSUPPORTED_TYPE             = 11203

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault: a stable message plus read-only context options.

    class attributes
    - __code__: default FaultCode for the fault type.
    - __title__: default short title used by the rich header.

    options (all optional, merged over the class defaults)
    - code, title, hint
    - context such as member, input, token, kind, index, names
    """
    __code__ = Unset
    __title__ = "command fault"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).__code__,
            "title": type(self).__title__,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        prog = text(getattr(main, "__prog__", self.options.get("prog", "covenant")), "prog-name")
        code = self.code.normalize() if isinstance(self.code, FaultCode) else self.code

        header = Text.assemble(
            "[ ",
            prog,
            " - ",
            text(code, "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")

        renders = [message]
        if self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.options["hint"], "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        message = overrides.pop("message", self.message)
        return type(self)(message, **{**self.options, **overrides})


class InitializationError(CommandException):
    """raised while building a command model from a contract type."""
    __title__ = "invalid command contract"


class BindingError(CommandException):
    """raised while binding a token stream onto a command instance."""
    __title__ = "invalid command line"


class NamingConflictError(InitializationError):
    __code__ = FaultCode.NAMING_CONFLICT
    __title__ = "naming conflict"


class InvalidAnnotationPlacementError(InitializationError):
    __code__ = FaultCode.INVALID_ANNOTATION_PLACEMENT
    __title__ = "invalid annotation placement"


class UnsupportedTypeError(InitializationError):
    __code__ = FaultCode.UNSUPPORTED_TYPE
    __title__ = "unsupported option type"


class UnknownOptionError(BindingError):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class OptionValueRequiredError(BindingError):
    __code__ = FaultCode.OPTION_VALUE_REQUIRED
    __title__ = "missing option value"


class ConversionError(BindingError):
    __code__ = FaultCode.CONVERSION_ERROR
    __title__ = "invalid option value"


__all__ = (
    "FaultCode",
    "CommandException",
    "InitializationError",
    "BindingError",
    "NamingConflictError",
    "InvalidAnnotationPlacementError",
    "UnsupportedTypeError",
    "UnknownOptionError",
    "OptionValueRequiredError",
    "ConversionError",
)
