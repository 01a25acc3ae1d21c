import logging

import coordinates
import csv_codec

logger = logging.getLogger(__name__)


def parse_command(line: str):
    """Split ``:name arg...`` into ``(name, arg)``; arg is None when absent."""
    text = line[1:] if line.startswith(":") else line
    name, sep, arg = text.partition(" ")
    return name, (arg if sep else None)


class CommandExecutor:
    """Runs ``:``-prefixed command lines against the session."""

    def __init__(self, session):
        self.session = session
        self.commands = {
            "echo": self.cmd_echo,
            "ec": self.cmd_echo,
            "edit": self.cmd_edit,
            "e": self.cmd_edit,
            "write": self.cmd_write,
            "w": self.cmd_write,
            "quit": self.cmd_quit,
            "q": self.cmd_quit,
            "quit!": self.cmd_quit,
            "q!": self.cmd_quit,
            "wq": self.cmd_write_quit,
            "x": self.cmd_write_quit,
        }

    @property
    def sheet(self):
        return self.session.sheet

    def _set_status(self, msg):
        self.session.set_message(msg)

    def get_command_names(self):
        return sorted(self.commands)

    # ---------- dispatch ----------
    def execute(self, line: str):
        if not line or not line.startswith(":"):
            return
        self._remember(line)

        name, arg = parse_command(line)
        handler = self.commands.get(name)
        if handler is not None:
            handler(name, arg)
            return

        if self.session.viewport.move_to(coordinates.parse(name)):
            return

        logger.info("unknown command %r", name)
        self._set_status(f"Unknown command: {name}")

    def _remember(self, line):
        history = self.session.history
        if history is None:
            return
        if history.append(line):
            history.persist(line)

    # ---------- commands ----------
    def cmd_echo(self, name, arg):
        self._set_status(arg or "")

    def _resolve_filename(self, arg):
        if arg and arg.strip():
            self.sheet.filename = arg.strip()
        if not self.sheet.filename:
            self._set_status("No filename")
            return None
        return self.sheet.filename

    def cmd_edit(self, name, arg):
        filename = self._resolve_filename(arg)
        if filename is None:
            return
        if csv_codec.load(self.sheet, filename, self.sheet.separator):
            self._set_status(f'"{filename}" loaded')
        else:
            self._set_status(f'Cannot read "{filename}"')

    def cmd_write(self, name, arg) -> bool:
        filename = self._resolve_filename(arg)
        if filename is None:
            return False
        if csv_codec.save(self.sheet, filename, self.sheet.separator):
            self._set_status(f'"{filename}" written')
            return True
        self._set_status(f'Cannot write "{filename}"')
        return False

    def cmd_quit(self, name, arg):
        forced = name.endswith("!")
        if self.sheet.modified and not forced:
            self._set_status("File modified (add ! to override)")
            return
        logger.info("quit requested")
        self.session.quit_requested = True

    def cmd_write_quit(self, name, arg):
        if self.cmd_write(name, arg):
            self.cmd_quit("quit!", None)
