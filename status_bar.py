from cell_values import is_error


def render_message(session, width):
    """Message line: the cursor cell's evaluation error, else the last status message."""
    coordinate = session.viewport.cursor
    text = session.message
    if coordinate in session.sheet:
        value = session.sheet.evaluate(coordinate)
        if is_error(value) and value.message:
            text = value.message
    return text.ljust(width)[:width]


def render_status(session, width):
    """
    Bottom bar: ``<address> <input>`` while editing, otherwise
    ``<address> <source>`` (or just the address for an empty cell).
    """
    name = session.viewport.cursor.name
    if session.editing:
        text = f"{name} {session.input.get_buffer()}"
    else:
        cell = session.sheet.get(session.viewport.cursor)
        text = f"{name} {cell.source}" if cell is not None else name
    return text.ljust(width)[:width]


def status_cursor_x(session):
    """Column of the terminal cursor in the status bar while editing."""
    name = session.viewport.cursor.name
    return len(name) + 1 + session.input.cursor
