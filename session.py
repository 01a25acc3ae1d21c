from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from input_buffer import InputBuffer
from sheet import Sheet
from viewport import Viewport


class Mode(Enum):
    NORMAL = "normal"
    INSERT = "insert"
    COMMAND = "command"


@dataclass
class Session:
    """Everything the editor mutates while running: one per process."""

    sheet: Sheet = field(default_factory=Sheet)
    viewport: Viewport = field(default_factory=Viewport)
    mode: Mode = Mode.NORMAL
    input: InputBuffer = field(default_factory=InputBuffer)
    message: str = ""
    quit_requested: bool = False
    history: Optional[Any] = None  # HistoryManager
    config: dict = field(default_factory=dict)
    on_mode_change: Optional[Any] = None

    @property
    def cursor(self):
        return self.viewport.cursor

    @property
    def editing(self) -> bool:
        return self.mode in (Mode.INSERT, Mode.COMMAND)

    def set_message(self, message: str):
        self.message = message or ""

    def history_items(self) -> List[str]:
        if self.history is None:
            return []
        return self.history.items

    def set_mode(self, mode: Mode):
        if mode == self.mode:
            return
        self.mode = mode
        if self.on_mode_change is not None:
            self.on_mode_change(mode)
