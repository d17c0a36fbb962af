r"""
Covenant option metadata and the @option decorator.

Overview
- Option: named option metadata (one or more aliases, an optional element type
  override and a short description). It carries no value and no behavior of
  its own; the model builder reads it from contract members.

- Placement
  • accessor methods: decorate with @option(...); the method keeps working as
    an ordinary (usually abstract) method and advertises the metadata through
    its __option__ hook.
  • fields: annotate the class attribute with Annotated[T, Option(...)].

    class Objects(ABC):
        @option("-list")
        @abstractmethod
        def getList(self) -> list[str] | None: ...

        @option("-map", type=(int, float))
        @abstractmethod
        def getMap(self) -> dict: ...          # erased: key/value from 'type'

        tags: Annotated[list[str], Option("-t")] = ["base"]

Metadata (sanitized on construction)
- names: Iterable[str] validated as shell-style identifiers; duplicates rejected;
  order of declaration is kept (the first name is the canonical one).
- type: Unset | type-like | tuple[type-like, ...] used when the declared
  composite type carries no generic arguments (key, value order for maps).
- descr: Unset | str | Text (short help), non-empty when provided.

Public API
- Classes: Option
- Decorators: option
"""
import functools
import operator
import re
from types import MethodType

from rich.text import Text

from .kinds import Kind
from .utils import *


class ArgumentType(type):
    """
    Metaclass giving option metadata stable, introspectable representations.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(names=('-v', '--verbose'), type=Unset, descr=None)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: validate and normalize option names.

    Each name must be a non-empty string matching a shell-style option pattern.
    Accepted forms include "-x", "-long", "-long-name", "--long" and "--long-name".
    Unicode letters are allowed. Duplicates are rejected.

    Name format regex: r"--?[^\W\d_](-?[^\W_]+)*"
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the type override and the description.

    - type: Unset, a type-like object (a class, a typing alias such as Short,
      or a Kind), or a non-empty tuple of them. A single entry is normalized
      into a one-element tuple.
    - descr: Unset or a non-empty (trimmed) string / rich Text; Unset becomes None.
    """
    if (override := metadata["type"]) is not Unset:
        if not isinstance(override, tuple):
            override = (override,)
        if not override:
            raise ValueError(f"{cls.__typename__} 'type' cannot be empty")
        for item in override:
            if item is None or isinstance(item, (str, bool, int, float)) and not isinstance(item, Kind):
                raise TypeError(f"{cls.__typename__} 'type' must be a type, a kind, or a tuple of them")
    metadata["type"] = override

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Option(metaclass=ArgumentType):
    """
    Named option metadata attached to a contract member.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "names",
        "type",
        "descr",
    )

    def __init__(self, *names, type=Unset, descr=Unset):
        """
        Parameters
        - names: one or more str
          Aliases for the option, e.g. "-b", "-bigint", "--verbose".
        - type: Unset | type-like | tuple[type-like, ...]
          Element type override for composite members whose declared type is
          erased (bare list, dict, ...). For maps the tuple is (key, value).
        - descr: Unset | str | Text
          Short description for help renderers. If Unset, becomes None.
        """
        metadata = {
            "names": names,
            "type": type,
            "descr": descr,
        }
        _sanitize_names(Option, metadata)
        _sanitize_metadata(Option, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __option__(self):
        """
        Introspection hook: identify this object as option metadata.
        """
        return self


def option(*args, **kwargs):
    """
    Decorator attaching option metadata to an accessor method.

    Usage
        class Primitives(ABC):
            @option("-b")
            @abstractmethod
            def aBoolean(self) -> bool: ...

    Behavior
    - Validates that it decorates a plain callable and enforces single application.
    - Returns the callable itself, so it stacks with @abstractmethod in either
      order; the metadata is reachable through callable.__option__().

    Parameters
    - *args, **kwargs: forwarded to Option(...) (names, type, descr).
    """
    option = Option(*args, **kwargs)

    @rename("option")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@option() must be applied to a callable")
        if hasattr(callback, "__option__"):
            raise TypeError("@option() must be applied only once")
        try:
            callback.__option__ = MethodType(rename(lambda self: option, "__option__"), callback)
        except AttributeError:
            raise TypeError("@option() must be applied to a function") from None
        return callback

    return wrapper


__all__ = (
    # Classes (metadata)
    "Option",

    # Decorators
    "option",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
