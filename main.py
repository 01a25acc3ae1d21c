import sys
import os
import curses
import logging

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

import config_paths
import csv_codec
from errors import UsageError
from history_manager import HistoryManager
from log_setup import setup_logging
from session import Session
from sheet import Sheet
from viewport import Viewport

try:
    from _version import __version__
except ImportError:
    __version__ = "0.0.0"

logger = logging.getLogger(__name__)


def usage(executable="levite"):
    return (
        f"\nUsage: {executable} [switches] [filename]\n"
        "  -s separator      Separator character to use. (Default `,')\n"
        "  --version         Print the version.\n"
        "  --help            Display this message.\n"
    )


def parse_args(args):
    """Return ``(options, action)``; action is "run", "help" or "version".

    Raises UsageError for anything malformed.
    """
    options = {"separator": None, "filename": None}
    offset = 0

    while offset < len(args):
        arg = args[offset]
        offset += 1

        if not arg:
            continue
        if not arg.startswith("-"):
            options["filename"] = arg
            break
        if arg == "-":
            break
        if arg.startswith("--"):
            if arg == "--help":
                return options, "help"
            if arg == "--version":
                return options, "version"
            raise UsageError(f"Unrecognized switch: {arg}")

        for flag in arg[1:]:
            if flag == "s":
                if offset >= len(args):
                    raise UsageError("Argument expected for the -s option.")
                separator = args[offset]
                offset += 1
                if len(separator) != 1:
                    raise UsageError("Separator must be a single character.")
                options["separator"] = separator
            elif flag == "h":
                return options, "help"
            else:
                raise UsageError(f"Unrecognized switch: `{flag}'")

    if offset < len(args):
        raise UsageError("Too many arguments given.")

    return options, "run"


def build_session(options, cfg):
    separator = options["separator"] or cfg["SEPARATOR"]
    sheet = Sheet(separator=separator, filename=options["filename"])
    session = Session(
        sheet=sheet,
        viewport=Viewport(cell_width=cfg["CELL_WIDTH"]),
        config=cfg,
    )

    history = HistoryManager(config_paths.HISTORY_PATH, max_items=cfg["HISTORY_SIZE"])
    history.load()
    session.history = history

    filename = sheet.filename
    if filename:
        if not os.path.exists(filename):
            session.set_message(f'"{filename}" [New]')
        elif csv_codec.load(sheet, filename, separator):
            session.set_message(f'"{filename}" loaded')
        else:
            session.set_message(f'Cannot read "{filename}"')
    return session


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    executable = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "levite"

    try:
        options, action = parse_args(args)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        print(usage(executable), file=sys.stderr)
        return 1

    if action == "help":
        print(usage(executable))
        return 0
    if action == "version":
        print(f"Levite {__version__}")
        return 0

    try:
        config_paths.ensure_config_dirs()
    except OSError:
        pass
    cfg = config_paths.load_config()
    setup_logging(config_paths.LOG_PATH, cfg["LOG_LEVEL"])
    logger.info("starting, file=%s", options["filename"])

    session = build_session(options, cfg)

    from orchestrator import Orchestrator

    def curses_main(stdscr):
        Orchestrator(stdscr, session).run()

    curses.wrapper(curses_main)
    return 0


if __name__ == "__main__":
    sys.exit(main())
