"""
Covenant command models: contract introspection and placement validation.

What this module provides
- OptionSpec: the resolved metadata of one bindable option (names, kind,
  element kinds, the contract member it binds to and how).
- CommandModel: the ordered option specs of a contract paired with the
  converter registry used to bind them.
- build(contract, converters): introspect a contract type into a CommandModel.

Member discovery
- The MRO is walked base first; the most-derived definition of a name wins and
  keeps the position of its first appearance.
- Methods: plain functions carrying an __option__ hook (see @option). They must
  be zero-argument accessors; the return annotation is the declared type and a
  missing one means a string option.
- Fields: class attributes annotated with Annotated[T, Option(...)].

Placement rules
- accessor methods are always valid binding targets, whatever they return.
- a field of scalar kind is rejected while building: a class-level constant
  cannot stand for a value written after construction.
- a field of composite kind builds fine and its current object becomes the
  shared backing container of the option; binding any occurrence of it is
  rejected later, by the binder. Both failures carry the same message.

Introspection runs once per contract (a weak per-class cache); building a model
for an already-seen contract only pairs the cached specs with a registry.
"""
import difflib
import functools
import inspect
import logging
import operator
import re
import weakref
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType, UnionType
from typing import Annotated, Union, get_args, get_origin

from .arguments import Option
from .containers import SortedSet
from .converters import Converters, DEFAULT
from .faults import (
    NamingConflictError,
    InvalidAnnotationPlacementError,
    UnsupportedTypeError,
    UnknownOptionError,
)
from .kinds import Kind, default
from .utils import *

logger = logging.getLogger(__name__)

FIELD_PLACEMENT_MESSAGE = "invalid option annotation on contract field"

_specs = weakref.WeakKeyDictionary()

_SCALARS = MappingProxyType({
    bool: Kind.BOOLEAN,
    int: Kind.INT,
    float: Kind.DOUBLE,
    str: Kind.STRING,
})


class OptionSpec:
    """
    resolved metadata for one bindable option.

    attributes
    - names: tuple[str, ...], ordered and distinct; names[0] is canonical.
    - kind: Kind of the declared type.
    - elements: tuple[Kind, ...]; one for lists/sets, (key, value) for maps,
      empty for scalars.
    - member: name of the contract member the option binds to.
    - placement: "method" or "field".
    - boxed: True when a primitive kind was declared optional (T | None).
    - initializer: the object captured from a composite field, Unset otherwise.
    - descr: description from the option metadata, or None.
    """
    __slots__ = ("_names", "_kind", "_elements", "_member", "_placement", "_boxed", "_initializer", "_descr")
    __introspectable__ = ("names", "kind", "elements", "member", "placement", "boxed")

    names = mirror("names")
    kind = mirror("kind")
    elements = mirror("elements")
    member = mirror("member")
    placement = mirror("placement")
    boxed = mirror("boxed")
    descr = mirror("descr")

    def __init__(self, names, kind, elements, member, placement, *, boxed=False, initializer=Unset, descr=None):
        self._names = tuple(names)
        self._kind = kind
        self._elements = tuple(elements)
        self._member = member
        self._placement = placement
        self._boxed = boxed
        self._initializer = initializer
        self._descr = descr

    @property
    def initializer(self):
        # identity matters: the captured container is shared, never copied
        return self._initializer

    @property
    def writable(self):
        return self._placement == "method"

    @property
    def default(self):
        """initial slot content: captured container, zero value or None"""
        return coalesce(self._initializer, default(self._kind, boxed=self._boxed))

    def __repr__(self):
        return "option-spec(%s)" % ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


class CommandModel:
    """
    the ordered option specs of a contract, plus the registry to convert them.
    """
    __slots__ = ("_contract", "_specs", "_names", "_converters")

    contract = mirror("contract")
    specs = mirror("specs")
    names = mirror("names")

    @property
    def converters(self):
        return self._converters

    def __init__(self, contract, specs, converters):
        self._contract = contract
        self._specs = tuple(specs)
        self._names = {name: spec for spec in self._specs for name in spec.names}
        self._converters = converters

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def resolve(self, name, /):
        """
        look an option spec up by exact name.

        raises UnknownOptionError (with close-match suggestions) when no option
        of the contract declares the name.
        """
        try:
            return self._names[name]
        except KeyError:
            pass
        suggestions = difflib.get_close_matches(str(name), self._names.keys(), 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "options of %s are: %s" % (self._contract.__name__, ", ".join(self._names) or "(none)")
        raise UnknownOptionError(
            "unknown option %r" % (name,),
            input=name,
            suggestions=tuple(suggestions),
            hint=hint,
            prog=self._contract.__name__,
        )

    def __repr__(self):
        return "command-model(contract=%s, specs=%r)" % (self._contract.__qualname__, self._specs)

    def __rich_repr__(self):
        yield "contract", self._contract
        yield "specs", self._specs


def _resolve_option(x, member):
    """
    return the Option behind an __option__ hook.
    """
    option = x.__option__()
    if not isinstance(option, Option):
        raise TypeError("__option__() non-option returned for member %r" % member)
    return option


def _unwrap(annotation):
    """
    strip Annotated layers and one Optional level off an annotation.

    returns (annotation, markers, options, boxed) where markers are the Kind
    entries and options the __option__-bearing entries found in Annotated
    metadata (outermost last).
    """
    markers = []
    options = []
    boxed = False
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            for item in reversed(annotation.__metadata__):
                if isinstance(item, Kind):
                    markers.insert(0, item)
                elif hasattr(item, "__option__") and callable(item.__option__):
                    options.insert(0, item)
            annotation = annotation.__origin__
        elif origin is Union or origin is UnionType:
            arguments = [argument for argument in get_args(annotation) if argument is not type(None)]
            if boxed or len(arguments) != 1 or len(arguments) == len(get_args(annotation)):
                return annotation, markers, options, Unset
            boxed = True
            annotation = arguments[0]
        else:
            return annotation, markers, options, boxed


def _classify(annotation):
    """
    map an annotation to (kind, boxed, generic arguments), or Unset.
    """
    annotation, markers, _, boxed = _unwrap(annotation)
    if boxed is Unset:
        return Unset
    if markers:
        kind = markers[-1]
        return kind, boxed, get_args(annotation) if kind.composite else ()
    if isinstance(annotation, type) and annotation in _SCALARS:
        return _SCALARS[annotation], boxed, ()

    origin = get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return Unset
    if issubclass(origin, SortedSet):
        kind = Kind.SET_SORTED
    elif issubclass(origin, Mapping):
        kind = Kind.MAP
    elif issubclass(origin, Set):
        kind = Kind.SET_UNORDERED
    elif issubclass(origin, Sequence) and not issubclass(origin, (str, bytes, bytearray)):
        kind = Kind.LIST
    else:
        return Unset
    return kind, boxed, get_args(annotation)


def _element(annotation, member):
    """
    resolve one element kind (a Kind, or anything _classify understands).
    """
    if isinstance(annotation, Kind):
        kind = annotation
    elif (classified := _classify(annotation)) is Unset:
        kind = Unset
    else:
        kind = classified[0]
    if kind is Unset or kind.composite:
        raise UnsupportedTypeError(
            "unsupported element type %r for member %r" % (annotation, member),
            member=member,
            hint="elements must be booleans, numbers or strings",
        )
    return kind


def _declared(annotation, override, member):
    """
    resolve (kind, elements, boxed) for a member's declared type.

    element kinds come from the generic arguments first, then from the option's
    type override; positions still missing default to strings.
    """
    if annotation is Unset:
        return Kind.STRING, (), False
    if (classified := _classify(annotation)) is Unset:
        raise UnsupportedTypeError(
            "unsupported option type %r for member %r" % (annotation, member),
            member=member,
            hint="use bool, int, float, str, a width alias, or a list/set/sorted-set/dict of them",
        )
    kind, boxed, arguments = classified
    if not kind.composite:
        return kind, (), boxed

    source = arguments or coalesce(override, ())
    elements = tuple(
        _element(source[index], member) if index < len(source) else Kind.STRING
        for index in range(kind.arity)
    )
    return kind, elements, boxed


def _method_spec(contract, name, function, option):
    """
    build the spec of an accessor method; any return type is acceptable.
    """
    parameters = list(inspect.signature(function).parameters.values())
    if len(parameters) != 1 or parameters[0].kind not in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        raise InvalidAnnotationPlacementError(
            "option accessor %r must take no arguments" % name,
            member=name,
            names=option.names,
            hint="declare it as 'def %s(self) -> T'" % name,
            prog=contract.__name__,
        )

    annotation = _annotations(function, name).get("return", Unset)
    if annotation is None or annotation is type(None):
        raise InvalidAnnotationPlacementError(
            "option accessor %r must return a value" % name,
            member=name,
            names=option.names,
            hint="annotate the return type of %r with the option type" % name,
            prog=contract.__name__,
        )

    kind, elements, boxed = _declared(annotation, option.type, name)
    return OptionSpec(option.names, kind, elements, name, "method", boxed=boxed, descr=option.descr)


def _field_spec(contract, name, annotation, option):
    """
    build the spec of an annotated class attribute, applying the field rules.
    """
    kind, elements, boxed = _declared(annotation, option.type, name)
    if not kind.composite:
        raise InvalidAnnotationPlacementError(
            FIELD_PLACEMENT_MESSAGE,
            member=name,
            names=option.names,
            kind=kind,
            hint="turn %r into an accessor method decorated with @option" % name,
            prog=contract.__name__,
        )

    initializer = next((vars(klass)[name] for klass in contract.__mro__ if name in vars(klass)), Unset)
    return OptionSpec(
        option.names, kind, elements, name, "field",
        boxed=boxed,
        initializer=coalesce(initializer),
        descr=option.descr,
    )


def _wrapped(member):
    """
    the function hidden inside staticmethod/classmethod/property, if any.
    """
    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    if isinstance(member, property):
        return member.fget
    return Unset


def _annotations(owner, /, member=Unset):
    """
    evaluated annotations of a class or an accessor function.

    an annotation that does not resolve raises UnsupportedTypeError naming the
    member: the accessor itself, or the class attribute whose annotation
    mentions the missing name.
    """
    try:
        return inspect.get_annotations(owner, eval_str=True)
    except NameError as exception:
        if member is Unset:
            member = owner.__qualname__
            try:
                raw = inspect.get_annotations(owner)
            except NameError:
                raw = {}
            for name, value in raw.items():
                if isinstance(value, str) and exception.name and re.search(r"\b%s\b" % re.escape(exception.name), value):
                    member = name
                    break
        raise UnsupportedTypeError(
            "unresolvable annotation for member %r (%s)" % (member, exception),
            member=member,
            hint="import the names used in the annotation of %r at module level" % member,
        ) from exception


def _introspect(contract):
    """
    discover the option specs of a contract, in declaration order.

    results are cached per contract class, weakly, so classes built once can
    still be collected.
    """
    try:
        return _specs[contract]
    except KeyError:
        pass

    hints = {}
    members = {}
    for klass in reversed(contract.__mro__):
        if klass is object:
            continue
        hints[klass] = _annotations(klass)
        for name in dict.fromkeys([*vars(klass), *hints[klass]]):
            members[name] = klass

    specs = []
    owners = {}
    for name, klass in members.items():
        member = vars(klass).get(name, Unset)

        if hasattr(wrapped := _wrapped(member), "__option__"):
            raise InvalidAnnotationPlacementError(
                "option annotation on %r must decorate a plain accessor method" % name,
                member=name,
                hint="remove the %s wrapper" % type(member).__name__,
                prog=contract.__name__,
            )

        if inspect.isfunction(member):
            if not (hasattr(member, "__option__") and callable(member.__option__)):
                continue
            spec = _method_spec(contract, name, member, _resolve_option(member, name))
        else:
            # a re-assigned field keeps the annotation of the nearest class declaring it
            annotation = next((hints[owner][name] for owner in contract.__mro__ if name in hints.get(owner, {})), Unset)
            if annotation is Unset or not (options := _unwrap(annotation)[2]):
                continue
            if len(options) > 1:
                raise InvalidAnnotationPlacementError(
                    "contract field %r carries more than one option annotation" % name,
                    member=name,
                    prog=contract.__name__,
                )
            spec = _field_spec(contract, name, annotation, _resolve_option(options[0], name))

        for alias in spec.names:
            if alias in owners:
                raise NamingConflictError(
                    "option name %r is declared by both %r and %r" % (alias, owners[alias], name),
                    input=alias,
                    member=name,
                    names=spec.names,
                    hint="give %r and %r distinct names" % (owners[alias], name),
                    prog=contract.__name__,
                )
            owners[alias] = name
        specs.append(spec)

    _specs[contract] = specs = tuple(specs)
    return specs


def build(contract, /, converters=DEFAULT):
    """
    build the command model of a contract type.

    parameters
    - contract: type
      the contract class (usually abstract) whose members declare the options.
    - converters: Converters | Mapping[Kind, Callable]
      converter registry; plain mappings are layered over the built-in set.

    raises
    - NamingConflictError, InvalidAnnotationPlacementError, UnsupportedTypeError
    """
    if not isinstance(contract, type):
        raise TypeError("build() argument must be a class")
    if not isinstance(converters, Converters):
        converters = Converters(converters)

    specs = _introspect(contract)
    logger.debug("built model for %s: %s", contract.__qualname__, ", ".join(spec.names[0] for spec in specs))
    return CommandModel(contract, specs, converters)


__all__ = (
    "OptionSpec",
    "CommandModel",
    "FIELD_PLACEMENT_MESSAGE",
    "build",
)
