from abc import ABC, abstractmethod

from rich.pretty import pprint

from covenant import *


class Objects(ABC):
    @option("-b")
    @abstractmethod
    def aBoolean(self) -> bool | None: ...

    @option("-y")
    @abstractmethod
    def aByte(self) -> Byte | None: ...

    @option("-i")
    @abstractmethod
    def anInt(self) -> int | None: ...

    @option("-f")
    @abstractmethod
    def aFloat(self) -> Float | None: ...

    @option("-bigint")
    @abstractmethod
    def aBigInteger(self) -> BigInt: ...

    @option("-string", descr="free text")
    @abstractmethod
    def aString(self) -> str: ...

    @option("-list")
    @abstractmethod
    def getList(self) -> list[str]: ...

    @option("-map", type=(int, float))
    @abstractmethod
    def getMap(self) -> dict: ...

    @option("-set", type=Short)
    @abstractmethod
    def getSortedSet(self) -> SortedSet: ...


if __name__ == '__main__':
    cli = CommandLine(Objects)
    pprint(cli.model)
    pprint(cli.parse())
