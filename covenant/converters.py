"""
Conversion registry: string tokens to option values.

A Converters object is an immutable mapping from Kind to a one-argument
callable turning a raw token into a value. DEFAULT holds the built-in set and
is shared by every model that does not ask for anything else; overrides are
layered on top without touching it:

    upper = Converters({Kind.STRING: str.upper})
    same = DEFAULT.extend({Kind.STRING: str.upper})

Converter callables signal a bad token by raising ValueError, TypeError or
ArithmeticError (OverflowError included); convert() turns those into a
ConversionError chained to the original exception.

Composite kinds are converted one occurrence at a time: lists and sets get one
element per token, maps get one (key, value) pair per token. Accumulating the
occurrences is up to the binder.
"""
import math
import re
import struct
from collections.abc import Mapping
from types import MappingProxyType

from .faults import ConversionError, OptionValueRequiredError
from .kinds import Kind, WIDTHS
from .utils import Unset

_INTEGRAL = re.compile(r"[+-]?\d+")
_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_boolean(token):
    match token.lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError("expected 'true' or 'false'")


def _integral(kind):
    bits = WIDTHS[kind]
    low, high = -(1 << bits - 1), (1 << bits - 1) - 1

    def parse(token):
        if not _INTEGRAL.fullmatch(token):
            raise ValueError("not a decimal integer")
        if not low <= (value := int(token)) <= high:
            raise OverflowError("out of range [%d, %d]" % (low, high))
        return value

    parse.__name__ = parse.__qualname__ = "parse_" + kind.name.lower()
    return parse


def parse_float(token):
    # single precision: round through a 4-byte pack, which raises OverflowError past ±3.4e38
    return struct.unpack("f", struct.pack("f", parse_double(token)))[0]


def parse_double(token):
    if not _DECIMAL.fullmatch(token):
        raise ValueError("not a decimal or scientific number")
    if math.isinf(value := float(token)):
        raise OverflowError("out of double range")
    return value


def parse_bigint(token):
    if not _INTEGRAL.fullmatch(token):
        raise ValueError("not a decimal integer")
    return int(token)


def parse_string(token):
    return token


def split_entry(token):
    """
    split a map entry on its first unescaped '='.

    in the key, "\\=" stands for a literal '=' and "\\\\" for a literal
    backslash; any other backslash is kept as is. "a\\=b=c" splits into
    ("a=b", "c") and "C:\\dir=1" into ("C:\\dir", "1"). Everything after the
    separator is the value, verbatim.
    """
    key = []
    index = 0
    while index < len(token):
        char = token[index]
        if char == "\\" and token[index + 1:index + 2] in ("=", "\\"):
            key.append(token[index + 1])
            index += 2
            continue
        if char == "=":
            return "".join(key), token[index + 1:]
        key.append(char)
        index += 1
    raise ValueError("expected a KEY=VALUE entry")


BUILTINS = MappingProxyType({
    Kind.BOOLEAN: parse_boolean,
    Kind.BYTE: _integral(Kind.BYTE),
    Kind.SHORT: _integral(Kind.SHORT),
    Kind.INT: _integral(Kind.INT),
    Kind.LONG: _integral(Kind.LONG),
    Kind.FLOAT: parse_float,
    Kind.DOUBLE: parse_double,
    Kind.BIGINT: parse_bigint,
    Kind.STRING: parse_string,
})


class Converters(Mapping):
    """
    Immutable converter registry keyed by scalar Kind.

    Parameters
    - overrides: Mapping[Kind, Callable[[str], Any]] (positional-only)
      Entries replacing the built-in converter of the same kind. Composite
      kinds cannot be overridden: they always delegate to their element kinds.
    """
    __slots__ = ("_table",)

    def __init__(self, overrides=MappingProxyType({}), /):
        if not isinstance(overrides, Mapping):
            raise TypeError("converters overrides must be a mapping")
        for kind, converter in overrides.items():
            if not isinstance(kind, Kind):
                raise TypeError("converters keys must be kinds")
            elif kind.composite:
                raise ValueError(f"converters cannot override composite kind {str(kind)!r}")
            elif not callable(converter):
                raise TypeError(f"converter for {str(kind)!r} must be callable")
        self._table = MappingProxyType(dict(BUILTINS) | dict(overrides))

    def __getitem__(self, kind):
        return self._table[kind]

    def __iter__(self):
        return iter(self._table)

    def __len__(self):
        return len(self._table)

    def __repr__(self):
        overridden = [str(kind) for kind, converter in self._table.items() if BUILTINS[kind] is not converter]
        return f"{type(self).__name__}(overrides={overridden!r})"

    def extend(self, overrides, /):
        """return a new registry with these overrides layered over this one"""
        if not isinstance(overrides, Mapping):
            raise TypeError("converters overrides must be a mapping")
        return type(self)({
            kind: converter for kind, converter in self._table.items() if BUILTINS[kind] is not converter
        } | dict(overrides))

    def scalar(self, token, kind, /):
        """
        convert one token into a value of a scalar kind.

        - an absent token (None or Unset) means `true` for booleans and is an
          OptionValueRequiredError for every other kind.
        - converter failures become ConversionError(token=, kind=, detail=).
        """
        if token is None or token is Unset:
            if kind is Kind.BOOLEAN:
                return True
            raise OptionValueRequiredError("a %s value is required" % kind, kind=kind)
        try:
            return self[kind](token)
        except (ValueError, TypeError, ArithmeticError) as exception:
            raise ConversionError(
                "%r is not a valid %s value (%s)" % (token, kind, exception),
                token=token,
                kind=kind,
                detail=str(exception),
            ) from exception

    def convert(self, token, kind, elements=(), /):
        """
        convert one occurrence for an option of the given kind.

        returns
        - scalar kinds: the converted value.
        - LIST / SET_SORTED / SET_UNORDERED: one converted element.
        - MAP: a (key, value) pair.
        """
        if not kind.composite:
            return self.scalar(token, kind)

        if len(elements) != kind.arity:
            raise ValueError("%s kind requires %d element kinds, got %d" % (kind, kind.arity, len(elements)))

        if kind is not Kind.MAP:
            return self.scalar(token, elements[0])

        if token is None or token is Unset:
            raise OptionValueRequiredError("a KEY=VALUE entry is required", kind=kind)
        try:
            key, value = split_entry(token)
        except ValueError as exception:
            raise ConversionError(
                "%r is not a valid %s entry (%s)" % (token, kind, exception),
                token=token,
                kind=kind,
                detail=str(exception),
            ) from exception
        return self.scalar(key, elements[0]), self.scalar(value, elements[1])


DEFAULT = Converters()


__all__ = (
    "Converters",
    "DEFAULT",
    "BUILTINS",
    "split_entry",
)
