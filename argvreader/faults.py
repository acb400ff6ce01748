"""
argvreader faults (errors) and rendering.

Scope
- FaultCode: well-known, stable string codes carried by option errors. Codes
  are caller-chosen; any string is accepted wherever a code is expected and
  FaultCode members compare equal to their values.
- CommandlineError / InvalidOptionError / InvalidOptionValueError: the domain
  errors that cross the reader boundary. Classifiers and converters raise
  them; the reader raises the predefined missing-argument error itself.
- ProtocolError: a bug in a supplied classifier (unknown classification tag,
  lookahead nested in lookahead). It is not a CommandlineError.
- report(): print a fault to stderr through rich. It never exits the process.

Rendering
- Each CommandlineError knows how to render itself (__rich__):
    [ prog — code | title ]
    message
     → hint
- Hosts can tune the output from __main__:
  • __prog__: program name shown in the header (defaults to argv[0] basename).
  • __styles__: mapping of style keys to rich styles, merged over the defaults.
"""
import os.path
import sys
from collections import defaultdict
from enum import StrEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

stderr = Console(stderr=True)


class FaultCode(StrEnum):
    """
    well-known codes used by the reader and by typical classifiers/converters.

    - UNKNOWN_OPTION: the classifier does not know an option-looking token.
    - MISSING_ARGUMENT: a value-taking option (or mandatory argument) got no value.
      the reader itself raises this one when input ends with a pending slot.
    - MISSING_COMMAND / UNKNOWN_COMMAND: sub-command dispatch failures.
    - EXPECT_ONE: a value that must occur exactly once occurred zero or many times.
    - EXPECT_NO_ARGUMENT: a grammar that takes no positional got one.
    """
    UNKNOWN_OPTION      = "unknown-option"
    MISSING_ARGUMENT    = "missing-argument"
    MISSING_COMMAND     = "missing-command"
    UNKNOWN_COMMAND     = "unknown-command"
    EXPECT_ONE          = "expect-one"
    EXPECT_NO_ARGUMENT  = "expect-no-argument"


def _main():
    return sys.modules.get("__main__")


def _prog():
    prog = getattr(_main(), "__prog__", Unset)
    if prog is Unset:
        prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argvreader"
    return prog


class CommandlineError(Exception):
    """
    base command-line error: a user-facing message plus optional render options.

    options
    - hint: str, one actionable sentence rendered under the message.
    - any other keyword is kept read-only in `options` for host renderers.
    """
    __title__ = "command-line error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("%s() message must be a string" % type(self).__name__)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    @property
    def code(self):
        return None

    def render(self, *, colorful=True):
        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(_main(), "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        parts = ["[ ", text(_prog(), "prog-name")]
        if self.code is not None:
            parts += [" — ", text(self.code, "code")]
        parts += [" | ", text(type(self).__title__, "error-title"), " ]"]

        renders = [Text.assemble(*parts), text(self.message, "error-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Group(*renders)

    def __rich__(self):
        return self.render()


class InvalidOptionError(CommandlineError):
    """
    an option (or positional slot) is invalid as a whole, e.g. unknown or absent.
    """
    __title__ = "invalid option"

    def __init__(self, message, code, name, /, **options):
        if not isinstance(code, str):
            raise TypeError("%s() code must be a string" % type(self).__name__)
        if not isinstance(name, str):
            raise TypeError("%s() name must be a string" % type(self).__name__)
        super().__init__(message, **options)
        self._code = code
        self.name = name

    @property
    def code(self):
        return self._code


class InvalidOptionValueError(CommandlineError):
    """
    the value given to (or missing from) an option is invalid.

    `value` holds the offending value when there is one, None otherwise.
    """
    __title__ = "invalid option value"

    def __init__(self, message, code, name, value=None, /, **options):
        if not isinstance(code, str):
            raise TypeError("%s() code must be a string" % type(self).__name__)
        if not isinstance(name, str):
            raise TypeError("%s() name must be a string" % type(self).__name__)
        super().__init__(message, **options)
        self._code = code
        self.name = name
        self.value = value

    @property
    def code(self):
        return self._code


class ProtocolError(RuntimeError):
    """
    the classifier broke the classification protocol (a bug, not a user mistake).
    """


def missing_argument(name, /, **options):
    """
    build the predefined missing-argument error for an option named `name`.
    """
    options.setdefault("hint", "pass a value right after the option")
    return InvalidOptionValueError(
        "the argument of %s is not specified" % name,
        FaultCode.MISSING_ARGUMENT,
        name,
        **options
    )


def report(fault, /, *, console=None, colorful=True):
    """
    print a command-line error to stderr (or to the given rich console).

    contract
    - fault must be a CommandlineError; anything else is a TypeError so that
      protocol errors and unrelated exceptions keep propagating as bugs.
    - nothing is raised for the fault itself and the process is never exited;
      exit-code policy belongs to the host application.
    """
    if not isinstance(fault, CommandlineError):
        raise TypeError("report() argument must be a command-line error")
    (stderr if console is None else console).print(fault.render(colorful=colorful))


__all__ = (
    "FaultCode",
    "CommandlineError",
    "InvalidOptionError",
    "InvalidOptionValueError",
    "ProtocolError",
    "missing_argument",
    "report",
)
