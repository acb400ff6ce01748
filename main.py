import re
import sys

from rich.pretty import pprint

from argvreader import *
from argvreader.logging import configure_logging, get_logger


def classifier(token, state):
    if state == "rest":
        return Argument("rest")
    if token == "--":
        return Rest()
    if token in ("-v", "--verbose"):
        return MultiFlag("verbose")
    if re.fullmatch(r"-vv+", token):
        return Replace(["-v"] * (len(token) - 1))
    if token in ("-o", "--output"):
        return LookAhead(lambda ahead, state: (
            Replace([token, ""]) if ahead is None or ahead.startswith("-") else Single("output")
        ))
    if token.startswith("-"):
        raise InvalidOptionError("unknown option: %s" % token, FaultCode.UNKNOWN_OPTION, token)
    return Argument("command", state="rest")


if __name__ == '__main__':
    reader = ArgvReader(classifier)
    try:
        opts = reader.read(sys.argv[1:])
    except CommandlineError as error:
        report(error)
        sys.exit(2)
    configure_logging(opts.multiflags.get("verbose", 0))
    get_logger().info("command %s with %d argument(s)", opts.arguments.get("command"), len(opts.rest))
    pprint(opts)
