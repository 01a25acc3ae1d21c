import pytest

import coordinates
from command_executor import CommandExecutor, parse_command
from history_manager import HistoryManager
from session import Session
from sheet import Sheet


def at(name):
    return coordinates.parse(name)


@pytest.fixture
def session():
    return Session()


@pytest.fixture
def executor(session):
    return CommandExecutor(session)


@pytest.mark.parametrize(
    "line, expected",
    [
        (":w", ("w", None)),
        (":w out.csv", ("w", "out.csv")),
        (":echo  two  spaces", ("echo", " two  spaces")),
        (":", ("", None)),
    ],
)
def test_parse_command(line, expected):
    assert parse_command(line) == expected


def test_echo(executor, session):
    executor.execute(":echo hello")
    assert session.message == "hello"
    executor.execute(":ec")
    assert session.message == ""


def test_unknown_command(executor, session):
    executor.execute(":frobnicate now")
    assert session.message == "Unknown command: frobnicate"


def test_lines_without_colon_are_ignored(executor, session):
    executor.execute("echo hi")
    assert session.message == ""


def test_goto_cell(executor, session):
    executor.execute(":c12")
    assert session.cursor == at("C12")
    executor.execute(":Z999")
    assert session.cursor == at("Z999")


def test_goto_out_of_range_is_unknown(executor, session):
    executor.execute(":A1000")
    assert session.message == "Unknown command: A1000"
    assert session.cursor == at("A1")


def test_quit_refused_while_modified(executor, session):
    session.sheet.set_input(at("A1"), "x")
    executor.execute(":q")
    assert not session.quit_requested
    assert session.message == "File modified (add ! to override)"
    executor.execute(":q!")
    assert session.quit_requested


def test_quit_clean_sheet(executor, session):
    executor.execute(":quit")
    assert session.quit_requested


def test_write_without_filename(executor, session):
    executor.execute(":w")
    assert session.message == "No filename"


def test_write_and_edit(tmp_path, executor, session):
    path = tmp_path / "data.csv"
    session.sheet.set_input(at("B3"), "42")
    session.sheet.set_input(at("C1"), "=B3*2")

    executor.execute(f":w {path}")
    assert session.message == f'"{path}" written'
    assert session.sheet.filename == str(path)
    assert not session.sheet.modified

    session.sheet.erase(at("B3"))
    executor.execute(":e")
    assert session.message == f'"{path}" loaded'
    assert session.sheet.evaluate(at("C1")) == 84
    assert not session.sheet.modified


def test_edit_missing_file(tmp_path, executor, session):
    executor.execute(f":e {tmp_path / 'absent.csv'}")
    assert session.message.startswith("Cannot read")


def test_write_failure(tmp_path, executor, session):
    session.sheet.set_input(at("A1"), "x")
    target = tmp_path / "no" / "such" / "dir.csv"
    executor.execute(f":w {target}")
    assert session.message == f'Cannot write "{target}"'
    assert session.sheet.modified


def test_write_quit(tmp_path, session):
    session.sheet = Sheet(filename=str(tmp_path / "wq.csv"))
    session.sheet.set_input(at("A1"), "1")
    CommandExecutor(session).execute(":wq")
    assert session.quit_requested
    assert (tmp_path / "wq.csv").read_text(encoding="utf-8") == "1\n"


def test_commands_are_remembered(tmp_path, executor, session):
    history = HistoryManager(str(tmp_path / "history.log"))
    session.history = history
    executor.execute(":echo one")
    executor.execute(":B2")
    executor.execute(":B2")
    assert history.items == [":echo one", ":B2"]
    assert (tmp_path / "history.log").read_text(encoding="utf-8") == ":echo one\n:B2\n"
