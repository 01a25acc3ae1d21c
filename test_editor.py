import curses

import pytest

import coordinates
from command_executor import CommandExecutor
from editor import Editor
from history_manager import HistoryManager
from session import Mode, Session


def at(name):
    return coordinates.parse(name)


@pytest.fixture
def session():
    return Session()


@pytest.fixture
def editor(session):
    return Editor(session, CommandExecutor(session))


def press(editor, *keys):
    for key in keys:
        if isinstance(key, str) and len(key) > 1:
            for ch in key:
                editor.handle_key(ch)
        else:
            editor.handle_key(key)


def test_insert_hello_into_a1(editor, session):
    press(editor, "i", "hello", 10)
    assert session.sheet.get(at("A1")).value == "hello"
    assert session.mode is Mode.NORMAL
    assert session.sheet.modified


def test_enter_in_normal_mode_starts_editing(editor, session):
    session.sheet.set_input(at("A1"), "42")
    press(editor, 10)
    assert session.mode is Mode.INSERT
    assert session.input.get_buffer() == "42"
    assert session.input.cursor == 2


def test_prepend_edit_puts_cursor_at_start(editor, session):
    session.sheet.set_input(at("A1"), "world")
    press(editor, "A", "hello ", 10)
    assert session.sheet.get(at("A1")).value == "hello world"


def test_escape_abandons_edit(editor, session):
    session.sheet.set_input(at("A1"), "keep")
    press(editor, "i", "xyz", 27)
    assert session.mode is Mode.NORMAL
    assert session.sheet.get(at("A1")).value == "keep"


def test_blank_submit_erases_cell(editor, session):
    session.sheet.set_input(at("A1"), "x")
    press(editor, "i", 21, 10)
    assert at("A1") not in session.sheet


def test_backspace_in_normal_mode_erases(editor, session):
    session.sheet.set_input(at("A1"), "x")
    press(editor, curses.KEY_BACKSPACE)
    assert at("A1") not in session.sheet


def test_movement_keys(editor, session):
    press(editor, "l", "l", "j", curses.KEY_DOWN, curses.KEY_LEFT)
    assert session.cursor == at("B3")
    press(editor, "k", "h", "h", "h")
    assert session.cursor == at("A2")


def test_command_echo(editor, session):
    press(editor, ":", "echo hi there", 10)
    assert session.message == "hi there"
    assert session.mode is Mode.NORMAL


def test_command_goto(editor, session):
    press(editor, ":", "C5", 10)
    assert session.cursor == at("C5")


def test_join_moves_up(editor, session):
    session.sheet.set_input(at("A1"), "2")
    session.sheet.set_input(at("A2"), "3")
    press(editor, "j", "J")
    assert session.sheet.get(at("A1")).value == 5
    assert at("A2") not in session.sheet
    assert session.cursor == at("A1")


def test_join_on_first_row_does_nothing(editor, session):
    session.sheet.set_input(at("A1"), "2")
    press(editor, "J")
    assert session.sheet.get(at("A1")).value == 2
    assert session.cursor == at("A1")


def test_open_above(editor, session):
    press(editor, "j", "O", "top", 10)
    assert session.sheet.get(at("A1")).value == "top"
    assert session.cursor == at("A1")


def test_open_above_on_first_row_stays_normal(editor, session):
    press(editor, "O")
    assert session.mode is Mode.NORMAL


def test_page_scroll(editor, session):
    press(editor, 6)
    assert session.viewport.top == session.viewport.page_height


def test_mode_change_callback(editor, session):
    seen = []
    session.on_mode_change = seen.append
    press(editor, "i", 27, ":", 27)
    assert seen == [Mode.INSERT, Mode.NORMAL, Mode.COMMAND, Mode.NORMAL]


def test_command_buffer_uses_history(tmp_path, editor, session):
    history = HistoryManager(str(tmp_path / "history.log"))
    history.append(":echo old")
    session.history = history
    press(editor, ":", 16, 10)
    assert session.message == "old"
    assert history.items == [":echo old"]
