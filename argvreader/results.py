r"""
argvreader classification results and the accumulator.

Overview
- Classifications (canonical tagged variant, one class per tag)
  • Flag(name) / NoFlag(name): set a boolean option to True / False.
  • MultiFlag(name): increment a counter.
  • Single(name): the next token is this option's scalar value.
  • Multiple(name): the next token is appended to this option's value list.
  • Argument(name): this token is a positional value of `name`; the reserved
    name "rest" also switches the reader to rest-mode.
  • Rest(): switch to rest-mode, dropping the triggering token.
  • Skip(): drop the token.
  • Replace(tokens): drop the token and splice `tokens` in its place.
  • NoMatch(): append the token to the rest list (no mode change).
  • LookAhead(callback): defer to callback(next_token_or_None, state).
  Every variant carries an optional next state; Unset means "keep the state".

- classify(extracted)
  • Normalizes the loose encodings a classifier may return (tuples, mappings,
    bare tags) into one canonical variant. The reader only dispatches on the
    canonical classes.

- Accumulator
  • The structured result under construction: flags, multiflags, singles,
    multiples, arguments and rest.

Loose encodings accepted by classify()
    False                               -> NoMatch()
    "rest" / "skip"                     -> Rest() / Skip()
    ("flag", "verbose")                 -> Flag("verbose")
    ("argument", "command", "rest")     -> Argument("command", state="rest")
    ("skip", None)                      -> Skip(state=None)
    ("replace", ["-o", ""])             -> Replace(["-o", ""])
    ("lookahead", callback)             -> LookAhead(callback)
    {"type": "single", "name": "out"}   -> Single("out")
    {"type": "replace", "replace": [...], "state": ...}
    {"type": "lookahead", "lookahead": callback}
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping

from .faults import ProtocolError
from .logging import get_logger
from .utils import *

logger = get_logger("results")


def view(name):
    """
    internal: read-only property over the private backing slot '_<name>'.
    """

    @rename(name)
    def getter(self):
        return object.__getattribute__(self, "_" + name)

    return property(getter)


class ClassificationType(type):
    """
    Metaclass for classification variants.

    Responsibilities
    - derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations ("no-flag", "look-ahead", ...).
    - declare one private slot and one read-only property for every field in
      __introspectable__ that no base class declared already.
    - provide stable __repr__/__rich_repr__ implementations.
    """

    def __new__(cls, name, bases, namespace, **options):
        inherited = {field for base in bases for field in getattr(base, "__introspectable__", ())}
        fields = [field for field in namespace.get("__introspectable__", ()) if field not in inherited]

        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
                "__slots__": tuple("_" + field for field in fields),
            } | {
                field: view(field) for field in fields
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                # the state is only shown when it changes something
                if field == "state" and self.state is Unset:
                    continue
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


class Classification(metaclass=ClassificationType):
    """
    base of every classification variant; carries the optional next state.
    """
    __introspectable__ = ("state",)

    def __init__(self, /, state=Unset):
        self._state = state

    def _fields(self):
        return tuple(getattr(self, field) for field in type(self).__introspectable__)

    def __eq__(self, other, /):
        if type(self) is not type(other):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self):
        return hash((type(self), self._fields()))


class Named(Classification):
    """
    base of the variants that write into the accumulator under a name.
    """
    __introspectable__ = ("name", "state")

    def __init__(self, name, /, state=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} name must be a string")
        super().__init__(state)
        self._name = name


class Flag(Named): ...
class NoFlag(Named): ...
class MultiFlag(Named): ...
class Single(Named): ...
class Multiple(Named): ...
class Argument(Named): ...


class Rest(Classification): ...
class Skip(Classification): ...
class NoMatch(Classification): ...


class Replace(Classification):
    """
    drop the current token and read `tokens` in its place, first token first.
    """
    __introspectable__ = ("tokens", "state")

    def __init__(self, tokens, /, state=Unset):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("replace tokens must be an iterable of strings")
        tokens = tuple(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("replace tokens must be an iterable of strings")
        super().__init__(state)
        self._tokens = tokens


class LookAhead(Classification):
    """
    defer the decision to callback(next_token_or_None, state).

    the callback must return any classification but another LookAhead. when
    its result keeps the state (Unset), the state given here applies instead.
    """
    __introspectable__ = ("callback", "state")

    def __init__(self, callback, /, state=Unset):
        if not callable(callback):
            raise TypeError("lookahead callback must be callable")
        super().__init__(state)
        self._callback = callback


_NAMED = {
    "flag": Flag,
    "noflag": NoFlag,
    "multiflag": MultiFlag,
    "single": Single,
    "multiple": Multiple,
    "argument": Argument,
}

_UNNAMED = {
    "rest": Rest,
    "skip": Skip,
}


def _unknown(tag):
    logger.error("unknown arg type: %r", tag)
    return ProtocolError("unknown arg type: %r" % (tag,))


def _malformed(extracted):
    logger.error("malformed classification: %r", extracted)
    return ProtocolError("malformed classification: %r" % (extracted,))


def _classify_sequence(extracted):
    match extracted:
        case []:
            raise _unknown(None)
        case [False]:
            return NoMatch()
        case [False, state]:
            return NoMatch(state)
        case [str() as tag, *payload] if tag in _NAMED:
            if len(payload) not in (1, 2):
                raise _malformed(extracted)
            return _NAMED[tag](*payload)
        case [str() as tag, *payload] if tag in _UNNAMED:
            if len(payload) > 1:
                raise _malformed(extracted)
            return _UNNAMED[tag](*payload)
        case ["replace", tokens]:
            return Replace(tokens)
        case ["replace", tokens, state]:
            return Replace(tokens, state)
        case ["lookahead", callback]:
            return LookAhead(callback)
        case ["replace" | "lookahead", *_]:
            raise _malformed(extracted)
        case [tag, *_]:
            raise _unknown(tag)


def _classify_mapping(extracted):
    tag = extracted.get("type")
    state = extracted.get("state", Unset)
    if tag is False:
        return NoMatch(state)
    if not isinstance(tag, str):
        raise _unknown(tag)
    if tag in _NAMED:
        if "name" not in extracted:
            raise _malformed(extracted)
        return _NAMED[tag](extracted["name"], state)
    if tag in _UNNAMED:
        return _UNNAMED[tag](state)
    if tag == "replace":
        if "replace" not in extracted:
            raise _malformed(extracted)
        return Replace(extracted["replace"], state)
    if tag == "lookahead":
        if "lookahead" not in extracted:
            raise _malformed(extracted)
        return LookAhead(extracted["lookahead"], state)
    raise _unknown(tag)


def classify(extracted, /):
    """
    Normalize whatever a classifier returned into a canonical Classification.

    Returns
    - the Classification itself when one is given.
    - the canonical variant for a loose encoding (see the module docstring).

    Raises
    - ProtocolError: for unknown tags ("unknown arg type: ...") and for known
      tags with a malformed payload (wrong arity, non-string names, ...).
    """
    if isinstance(extracted, Classification):
        return extracted
    if extracted is False:
        return NoMatch()
    if isinstance(extracted, str):
        try:
            return _UNNAMED[extracted]()
        except KeyError:
            raise _unknown(extracted) from None
    try:
        if isinstance(extracted, tuple | list):
            return _classify_sequence(extracted)
        if isinstance(extracted, Mapping):
            return _classify_mapping(extracted)
    except TypeError as error:
        logger.error("malformed classification %r: %s", extracted, error)
        raise ProtocolError("malformed classification: %r (%s)" % (extracted, error)) from error
    raise _unknown(extracted)


class Bucket(dict):
    """
    dict whose keys are also readable as attributes (opts.singles.output).
    """
    __slots__ = ()

    def __getattr__(self, name, /):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None


class Accumulator:
    """
    The structured result of one read, handed to the converter when input ends.

    Fields
    - flags: name -> bool (last Flag/NoFlag wins)
    - multiflags: name -> int
    - singles: name -> str (last value wins)
    - multiples: name -> list[str], arrival order
    - arguments: name -> list[str], arrival order
    - rest: list[str]

    Keys are created on first write, so a missing key means "never seen".
    """
    __slots__ = ("flags", "multiflags", "singles", "multiples", "arguments", "rest")

    def __init__(self):
        self.flags = Bucket()
        self.multiflags = Bucket()
        self.singles = Bucket()
        self.multiples = Bucket()
        self.arguments = Bucket()
        self.rest = []

    def as_dict(self):
        """
        Return a plain nested copy (dicts and lists only).
        """
        return {
            "flags": dict(self.flags),
            "multiflags": dict(self.multiflags),
            "singles": dict(self.singles),
            "multiples": {name: list(values) for name, values in self.multiples.items()},
            "arguments": {name: list(values) for name, values in self.arguments.items()},
            "rest": list(self.rest),
        }

    def __eq__(self, other, /):
        if not isinstance(other, Accumulator):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    __hash__ = None

    def __rich_repr__(self):
        for field in type(self).__slots__:
            yield field, getattr(self, field)

    def __repr__(self):
        return f"accumulator({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


__all__ = (
    "Classification",
    "Flag",
    "NoFlag",
    "MultiFlag",
    "Single",
    "Multiple",
    "Argument",
    "Rest",
    "Skip",
    "Replace",
    "NoMatch",
    "LookAhead",
    "classify",
    "Accumulator",
)
