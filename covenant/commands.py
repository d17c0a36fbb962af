"""
Covenant command lines: the one-object entry point.

    class Primitives(ABC):
        @option("-b")
        @abstractmethod
        def aBoolean(self) -> bool: ...

        @option("-i")
        @abstractmethod
        def anInt(self) -> int: ...

    cli = CommandLine(Primitives)
    primitives = cli.parse("-b -i3")
    primitives.aBoolean(), primitives.anInt()    # (True, 3)

CommandLine builds the model of a contract once, instantiates its command and
binds every parse() onto that same command. Each parse starts from the option
defaults again, so a command always reflects the last parse only.
"""
import sys
from collections.abc import Iterable

from .binding import bind
from .converters import DEFAULT
from .models import build
from .proxies import instantiate
from .tokens import segment
from .utils import *


class CommandLine:
    """
    build, instantiate and bind a contract in one place.

    Parameters
    - contract: type (positional-only)
      the contract class declaring the options.
    - converters: Converters | Mapping[Kind, Callable] (keyword-only)
      registry used to convert raw values; defaults to the built-in set.

    Raises
    - NamingConflictError, InvalidAnnotationPlacementError, UnsupportedTypeError
      from building the model.
    """
    __slots__ = ("_model", "_command")

    def __init__(self, contract, /, *, converters=DEFAULT):
        self._model = build(contract, converters)
        self._command = instantiate(self._model)

    @property
    def model(self):
        return self._model

    @property
    def command(self):
        return self._command

    def parse(self, prompt=Unset, /):
        """
        tokenize and bind a command line, returning the bound command.

        - prompt: Unset | str | Iterable[str]
          • Unset: read sys.argv[1:].
          • str: split with shlex.split.
          • Iterable[str]: used as the token list (each must be str).
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = prompt
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        return self.bind(segment(tokens, self._model))

    def bind(self, events, /):
        """bind already segmented (name, value) events, returning the bound command"""
        bind(self._command, events)
        return self._command

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, self._model.contract.__qualname__)

    def __rich_repr__(self):
        yield self._model.contract
        yield "model", self._model
        yield "command", self._command


__all__ = (
    "CommandLine",
)
