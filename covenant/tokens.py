r"""
Reference tokenizer: argv to (name, value) events.

segment() knows the option names of a model and resolves, for each token:

- an exact option name: switches (boolean options, and lists/sets of
  booleans) take no value; every other option takes the next token as its
  value, or None when the stream is exhausted.
      -b          → ("-b", None)
      -i 3        → ("-i", "3")
- an inline assignment on a known name:
      -bigint=7   → ("-bigint", "7")
      -map=1=2.0  → ("-map", "1=2.0")
- an attached value after the longest known name that takes one:
      -y1         → ("-y", "1")
- anything else becomes (token, None), left for the binder to reject.

A prompt string is split shell-style first (shlex), so quoting works:
    segment('-string "a b"', model)  → [("-string", "a b")]
"""
import logging
import shlex
from collections import deque

from .kinds import Kind

logger = logging.getLogger(__name__)


def _switch(spec):
    if spec.kind is Kind.BOOLEAN:
        return True
    return spec.kind.arity == 1 and spec.elements[0] is Kind.BOOLEAN


def segment(argv, model, /):
    """
    split argv into the ordered (name, value) events of the given model.

    parameters
    - argv: str | Iterable[str]
      a prompt string (shell-split) or an already split argument vector.
    - model: CommandModel
      provides the known option names.
    """
    if isinstance(argv, str):
        argv = shlex.split(argv)

    names = model.names
    tokens = deque(argv)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("segment() tokens must be strings")

    events = []
    while tokens:
        token = tokens.popleft()
        if (spec := names.get(token)) is not None:
            if _switch(spec):
                events.append((token, None))
            else:
                events.append((token, tokens.popleft() if tokens else None))
            continue

        name, separator, value = token.partition("=")
        if separator and name in names:
            events.append((name, value))
            continue

        prefix = max(
            (name for name, spec in names.items() if token.startswith(name) and not _switch(spec)),
            key=len,
            default=None,
        )
        if prefix is not None:
            events.append((prefix, token[len(prefix):]))
        else:
            events.append((token, None))

    logger.debug("segmented %d events: %r", len(events), events)
    return events


__all__ = (
    "segment",
)
