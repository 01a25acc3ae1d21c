import curses


class ScreenLayout:
    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: header + grid, message line (1 line), status bar (1 line)
        self.message_h = 1
        self.status_h = 1

        self.table_h = max(2, self.H - self.message_h - self.status_h)

        self.table_win = curses.newwin(self.table_h, self.W, 0, 0)
        # grid pane must never own cursor
        self.table_win.leaveok(True)

        self.message_win = curses.newwin(self.message_h, self.W, self.table_h, 0)
        self.message_win.leaveok(True)

        # the status bar owns the cursor while editing
        self.status_win = curses.newwin(
            self.status_h, self.W, self.table_h + self.message_h, 0
        )
