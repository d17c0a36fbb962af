"""
Covenant binding driver: apply an event stream to a command instance.

An event is a (name, value) pair where value is the raw string token, or None
when the option was given without one. For every event, in order:

1. resolve the name to an option spec (UnknownOptionError);
2. refuse writes to options bound to contract fields
   (InvalidAnnotationPlacementError);
3. convert the token with the model's registry
   (ConversionError / OptionValueRequiredError);
4. write or accumulate the converted value into the option slot.

An event either fully updates its slot or raises; slots written by earlier
events of the same call are kept. Each bind() starts by resetting the method
slots of the instance to their defaults.
"""
import functools
import logging

from .faults import BindingError, ConversionError, InvalidAnnotationPlacementError
from .models import FIELD_PLACEMENT_MESSAGE
from .proxies import store_of

logger = logging.getLogger(__name__)


@functools.cache
def _ordinal(number):
    """
    human-friendly ordinal label for a 1-based event position.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"
    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _event(event, index):
    try:
        if isinstance(event, str):
            raise TypeError
        name, token = event
    except (TypeError, ValueError):
        raise TypeError("bind() events must be (name, value) pairs, got %r at %s position" % (event, _ordinal(index))) from None
    if not isinstance(name, str):
        raise TypeError("bind() event names must be strings")
    if not (token is None or isinstance(token, str)):
        raise TypeError("bind() event values must be strings or None")
    return name, token


def bind(instance, events, /):
    """
    bind an ordered stream of (name, value) events onto a command instance.

    parameters
    - instance: an object returned by instantiate().
    - events: Iterable[tuple[str, str | None]], finite.

    raises
    - TypeError: instance was not produced by instantiate(), or malformed events.
    - UnknownOptionError, InvalidAnnotationPlacementError, ConversionError,
      OptionValueRequiredError: carrying the event 'input' name and 'index'.
    """
    store = store_of(instance)
    model = store.model
    store.reset()

    for index, event in enumerate(events, 1):
        name, token = _event(event, index)

        try:
            spec = model.resolve(name)
        except BindingError as exception:
            raise exception.__replace__(
                message="unknown option %r at %s position" % (name, _ordinal(index)),
                index=index,
            ) from None

        if not spec.writable:
            raise InvalidAnnotationPlacementError(
                FIELD_PLACEMENT_MESSAGE,
                input=name,
                index=index,
                member=spec.member,
                names=spec.names,
                hint="%r is a class-level field; declare it as an accessor method to bind %s" % (spec.member, name),
                prog=model.contract.__name__,
            )

        try:
            value = model.converters.convert(token, spec.kind, spec.elements)
        except BindingError as exception:
            if token is None:
                message = "option %r at %s position requires a value" % (name, _ordinal(index))
                hint = "pass a value after %s (for example: %s <value>)" % (name, name)
            else:
                message = "invalid value %r for option %r at %s position" % (token, name, _ordinal(index))
                hint = exception.message
            raise exception.__replace__(
                message=message,
                input=name,
                index=index,
                member=spec.member,
                hint=hint,
                prog=model.contract.__name__,
            ) from exception

        try:
            store.store(spec, value)
        except TypeError as exception:
            raise ConversionError(
                "value %r for option %r at %s position cannot be stored in a %s" % (value, name, _ordinal(index), spec.kind),
                input=name,
                index=index,
                member=spec.member,
                token=token,
                kind=spec.kind,
                detail=str(exception),
                hint="the %s converter must return hashable, mutually comparable values" % (spec.elements or (spec.kind,))[0],
                prog=model.contract.__name__,
            ) from exception
        logger.debug("bound %s (%s) to %r at event %d", name, spec.member, value, index)


__all__ = (
    "bind",
)
