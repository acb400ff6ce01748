"""
argvreader engine: turn a flat token list into an Accumulator, one
classifier call at a time.

What this module provides
- ArgvReader(classifier, converter): the reusable reader. read(tokens) runs
  the loop below and returns converter(accumulator).

The loop
- rest-mode: every remaining token is appended to `rest` untouched.
- pending slot: after Single(name) / Multiple(name) the very next token is the
  value, consumed without asking the classifier.
- otherwise the classifier decides. A LookAhead result is resolved by calling
  its callback with the next token (or None at the end of input) exactly once.
- Replace(tokens) pushes `tokens` back at the read position so the first of
  them is classified next.
- input ending with an armed pending slot raises the missing-argument error.

Per-call state (queue, threaded state, pending slot, rest-mode) lives in a
_Cursor created by read(); the reader object itself is never mutated, so one
reader can serve any number of reads.

Quick example
    >>> from argvreader import ArgvReader, Flag, Single, Rest, NoMatch
    >>> def classifier(token, state):
    ...     match token:
    ...         case "-v": return Flag("verbose")
    ...         case "-o": return Single("output")
    ...         case "--": return Rest()
    ...     return NoMatch()
    >>> opts = ArgvReader(classifier).read(["-v", "-o", "out.txt", "a", "--", "-b"])
    >>> opts.singles.output, opts.rest
    ('out.txt', ['a', '-b'])
"""
import shlex
from collections import deque
from collections.abc import Iterable

from .faults import ProtocolError, missing_argument
from .logging import get_logger
from .results import *
from .utils import Unset, coalesce

logger = get_logger("reader")


def _identity(accumulator):
    return accumulator


class _Cursor:
    """
    mutable bookkeeping of a single read.

    - queue: private working copy of the tokens (Replace edits it).
    - state: caller's opaque state, starts as None.
    - pending: None, or the Single/Multiple classification awaiting its value.
    - rest: True once rest-mode started; never goes back.
    """
    __slots__ = ("queue", "state", "pending", "rest")

    def __init__(self, tokens):
        self.queue = deque(tokens)
        self.state = None
        self.pending = None
        self.rest = False


class ArgvReader:
    """
    Reusable command-line reader built from a classifier and a converter.

    Parameters
    - classifier: Callable[[str, state], Classification | loose encoding]
      decides what each token is. It may raise CommandlineError subclasses to
      reject the input; they propagate unchanged.
    - converter: Callable[[Accumulator], T] | None
      maps the finished accumulator to the caller's options. Called exactly
      once per successful read. Defaults to returning the accumulator.
    """

    def __init__(self, classifier, converter=None):
        if not callable(classifier):
            raise TypeError("ArgvReader() classifier must be callable")
        if converter is None:
            converter = _identity
        elif not callable(converter):
            raise TypeError("ArgvReader() converter must be callable")
        self.classifier = classifier
        self.converter = converter

    def __repr__(self):
        return "argv-reader(classifier=%r, converter=%r)" % (self.classifier, self.converter)

    def read(self, tokens):
        """
        Read `tokens` and return converter(accumulator).

        Parameters
        - tokens: Iterable[str] | str
          • Iterable[str]: used as-is; the caller's sequence is never modified.
          • str: shell-like string, split with shlex.split.

        Raises
        - TypeError: when tokens is not a string or an iterable of strings.
        - InvalidOptionValueError ("missing-argument"): input ended while a
          Single/Multiple was still waiting for its value.
        - ProtocolError: the classifier returned an unknown classification or
          a LookAhead from inside a lookahead callback.
        - anything raised by the classifier, a lookahead callback or the converter.
        """
        cursor = _Cursor(_tokenize(tokens))
        accumulator = Accumulator()

        logger.debug("reading %d token(s)", len(cursor.queue))

        while cursor.queue:
            token = cursor.queue.popleft()

            if cursor.rest:
                accumulator.rest.append(token)
                continue

            if cursor.pending is not None:
                self._fill(cursor, accumulator, token)
                continue

            classification, state = self._classify(cursor, token)
            if state is not Unset:
                cursor.state = state
            self._dispatch(cursor, accumulator, token, classification)

        if cursor.pending is not None:
            logger.debug("input ended while %r waits for its value", cursor.pending)
            raise missing_argument(cursor.pending.name)

        logger.debug("read finished: %r", accumulator)
        return self.converter(accumulator)

    def _classify(self, cursor, token):
        """
        ask the classifier about `token` and resolve a lookahead if needed.

        returns (classification, state) where state is the next state to thread
        (Unset keeps the current one).
        """
        classification = classify(self.classifier(token, cursor.state))
        if not isinstance(classification, LookAhead):
            return classification, classification.state

        ahead = cursor.queue[0] if cursor.queue else None
        resolved = classify(classification.callback(ahead, cursor.state))
        if isinstance(resolved, LookAhead):
            logger.error("lookahead in lookahead for %r", token)
            raise ProtocolError("lookahead in lookahead is not allowed")

        logger.debug("%r looked ahead at %r: %r", token, ahead, resolved)
        return resolved, coalesce(resolved.state, classification.state)

    def _fill(self, cursor, accumulator, token):
        pending, cursor.pending = cursor.pending, None
        if isinstance(pending, Single):
            accumulator.singles[pending.name] = token
        else:
            accumulator.multiples.setdefault(pending.name, []).append(token)

    def _dispatch(self, cursor, accumulator, token, classification):
        logger.debug("%r: %r", token, classification)

        match classification:
            case Flag(name=name):
                accumulator.flags[name] = True
            case NoFlag(name=name):
                accumulator.flags[name] = False
            case MultiFlag(name=name):
                accumulator.multiflags[name] = accumulator.multiflags.get(name, 0) + 1
            case Single() | Multiple():
                cursor.pending = classification
            case Argument(name="rest"):
                accumulator.arguments.setdefault("rest", []).append(token)
                accumulator.rest.append(token)
                cursor.rest = True
            case Argument(name=name):
                accumulator.arguments.setdefault(name, []).append(token)
            case Rest():
                cursor.rest = True
            case Skip():
                pass
            case NoMatch():
                accumulator.rest.append(token)
            case Replace(tokens=tokens):
                cursor.queue.extendleft(reversed(tokens))
            case _:
                logger.error("unknown arg type for %r: %r", token, classification)
                raise ProtocolError("unknown arg type: %s" % type(classification).__typename__)


def _tokenize(tokens):
    if isinstance(tokens, str):
        return shlex.split(tokens)
    if not isinstance(tokens, Iterable):
        raise TypeError("read() argument must be a string or an iterable of strings")
    tokens = list(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("read() argument must be a string or an iterable of strings")
    return tokens


__all__ = (
    "ArgvReader",
)
