"""
Covenant proxies: per-instance value storage and contract implementation.

instantiate(model) synthesizes, through the contract's own metaclass, a
subclass of the contract type whose bound members read from a ValueStore:

- accessor methods become plain functions returning their slot.
- fields become read-only properties returning their slot (the captured
  container, shared with the contract's class attribute).
- any abstract method left over raises NotImplementedError when called.

Every instance gets its own synthesized class, so the store lives in the
class namespace under the non-identifier key "-store" and never collides with
contract members. The contract's __init__ is not run.
"""
import logging

from .containers import SortedSet
from .kinds import Kind
from .utils import *

logger = logging.getLogger(__name__)


class ValueStore:
    """
    one value slot per option spec of a model.

    method slots start at (and reset to) the type default of their spec; field
    slots hold the captured container for the lifetime of the store.
    """
    __slots__ = ("_model", "_values")

    def __init__(self, model):
        self._model = model
        self._values = {spec: spec.default for spec in model}

    @property
    def model(self):
        return self._model

    def reset(self):
        for spec in self._model:
            if spec.writable:
                self._values[spec] = spec.default

    def read(self, spec, /):
        return self._values[spec]

    def store(self, spec, value, /):
        """
        write a converted occurrence into the slot of a writable spec.

        scalars are replaced; lists append, sets add, maps assign the (key,
        value) pair. Composite containers are created on first occurrence and
        only installed once the value is in. A value the container rejects
        (unhashable, incomparable) raises TypeError and leaves the slot as it
        was.
        """
        if not spec.writable:
            raise ValueError("slot of %r is read-only" % spec.member)

        if not spec.kind.composite:
            self._values[spec] = value
            return

        if spec.kind is Kind.MAP:
            try:
                key, item = value
            except (TypeError, ValueError):
                raise TypeError("map entry must be a (key, value) pair, got %r" % (value,)) from None

        container = self._values[spec]
        if container is None:
            container = {
                Kind.LIST: list,
                Kind.SET_UNORDERED: set,
                Kind.SET_SORTED: SortedSet,
                Kind.MAP: dict,
            }[spec.kind]()

        match spec.kind:
            case Kind.LIST:
                container.append(value)
            case Kind.SET_UNORDERED | Kind.SET_SORTED:
                container.add(value)
            case Kind.MAP:
                container[key] = item

        self._values[spec] = container

    def items(self):
        for spec in self._model:
            yield spec.member, self._values[spec]


def _accessor(contract, store, spec):
    def accessor(self):
        return store.read(spec)
    accessor.__qualname__ = "%s.%s" % (contract.__qualname__, spec.member)
    accessor.__name__ = spec.member
    return accessor


def _unimplemented(contract, name):
    @rename(name)
    def stub(self, *args, **kwargs):
        raise NotImplementedError("%s.%s is not bound to any option" % (contract.__name__, name))

    if isinstance(getattr(contract, name, None), property):
        return property(stub)
    return stub


def instantiate(model):
    """
    create a command instance implementing the model's contract.

    returns
    - an instance of a fresh subclass of model.contract whose option members
      read the values of a new ValueStore (all at their defaults).
    """
    contract = model.contract
    store = ValueStore(model)

    namespace = {
        "__module__": contract.__module__,
        "__qualname__": contract.__qualname__,
        "__doc__": contract.__doc__,
        "-store": store,
    }
    for spec in model:
        accessor = _accessor(contract, store, spec)
        namespace[spec.member] = accessor if spec.placement == "method" else property(accessor)

    for name in getattr(contract, "__abstractmethods__", ()):
        if name not in namespace:
            namespace[name] = _unimplemented(contract, name)

    if contract.__repr__ is object.__repr__:
        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__name__,
                ", ".join("%s=%r" % item for item in store.items())
            )
        namespace["__repr__"] = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            yield from store.items()
        namespace["__rich_repr__"] = __rich_repr__

    cls = type(contract)(contract.__name__, (contract,), namespace)
    self = cls.__new__(cls)
    logger.debug("instantiated %s with %d option slots", contract.__qualname__, len(model))
    return self


def store_of(instance, /):
    """
    return the ValueStore behind a command instance.

    raises TypeError when the instance was not created by instantiate().
    """
    store = vars(type(instance)).get("-store")
    if not isinstance(store, ValueStore):
        raise TypeError("%s object is not a command instance" % type(instance).__name__)
    return store


__all__ = (
    "ValueStore",
    "instantiate",
    "store_of",
)
