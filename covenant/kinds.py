"""
Semantic option kinds and their zero values.

Python has a single int and a single float, so the width a contract wants is
carried as Annotated metadata: Byte, Short, Int, Long and BigInt are all int,
Float and Double are both float. Plain int means Int and plain float means
Double.

    class Sizes(ABC):
        @option("-y")
        @abstractmethod
        def aByte(self) -> Byte: ...

        @option("-l")
        @abstractmethod
        def aLong(self) -> Long | None: ...   # boxed: reads None until bound

DEFAULTS is the type default registry: only the primitive kinds have an
entry, every other kind starts out as None.
"""
import enum
from types import MappingProxyType
from typing import Annotated


class Kind(enum.Enum):
    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BIGINT = "big-integer"
    STRING = "string"
    LIST = "list"
    SET_SORTED = "sorted-set"
    SET_UNORDERED = "set"
    MAP = "map"

    @property
    def composite(self):
        return self in (Kind.LIST, Kind.SET_SORTED, Kind.SET_UNORDERED, Kind.MAP)

    @property
    def primitive(self):
        return self in DEFAULTS

    @property
    def arity(self):
        """number of element kinds a composite kind carries (0 for scalars)"""
        return 2 if self is Kind.MAP else int(self.composite)

    def __str__(self):
        return self.value


DEFAULTS = MappingProxyType({
    Kind.BOOLEAN: False,
    Kind.BYTE: 0,
    Kind.SHORT: 0,
    Kind.INT: 0,
    Kind.LONG: 0,
    Kind.FLOAT: 0.0,
    Kind.DOUBLE: 0.0,
})

# bit widths of the range-checked integral kinds
WIDTHS = MappingProxyType({
    Kind.BYTE: 8,
    Kind.SHORT: 16,
    Kind.INT: 32,
    Kind.LONG: 64,
})


def default(kind, /, *, boxed=False):
    """zero value of an unboxed primitive kind, None for everything else"""
    if not isinstance(kind, Kind):
        raise TypeError("default() argument must be a kind")
    return None if boxed else DEFAULTS.get(kind)


Byte = Annotated[int, Kind.BYTE]
Short = Annotated[int, Kind.SHORT]
Int = Annotated[int, Kind.INT]
Long = Annotated[int, Kind.LONG]
BigInt = Annotated[int, Kind.BIGINT]
Float = Annotated[float, Kind.FLOAT]
Double = Annotated[float, Kind.DOUBLE]


__all__ = (
    "Kind",
    "DEFAULTS",
    "WIDTHS",
    "default",
    "Byte",
    "Short",
    "Int",
    "Long",
    "BigInt",
    "Float",
    "Double",
)
