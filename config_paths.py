import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "levite")
HISTORY_PATH = os.path.join(CONFIG_DIR, "history.log")
LOG_PATH = os.path.join(CONFIG_DIR, "levite.log")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
SEPARATOR_DEFAULT = ","
CELL_WIDTH_DEFAULT = 10
CELL_WIDTH_RANGE = (4, 40)
HISTORY_SIZE_DEFAULT = 100
LOG_LEVEL_DEFAULT = "WARNING"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)
    if not os.path.exists(HISTORY_PATH):
        try:
            with open(HISTORY_PATH, "w", encoding="utf-8") as f:
                f.write("")
        except OSError:
            pass


def load_config():
    cfg = {
        "SEPARATOR": SEPARATOR_DEFAULT,
        "CELL_WIDTH": CELL_WIDTH_DEFAULT,
        "HISTORY_SIZE": HISTORY_SIZE_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    separator = data.get("separator")
    if isinstance(separator, str) and len(separator) == 1:
        cfg["SEPARATOR"] = separator

    cell_width = data.get("cell_width")
    low, high = CELL_WIDTH_RANGE
    if isinstance(cell_width, int) and not isinstance(cell_width, bool) and low <= cell_width <= high:
        cfg["CELL_WIDTH"] = cell_width

    history_size = data.get("history_size")
    if isinstance(history_size, int) and not isinstance(history_size, bool) and history_size >= 0:
        cfg["HISTORY_SIZE"] = history_size

    log_level = data.get("log_level")
    if isinstance(log_level, str) and log_level.upper() in _LOG_LEVELS:
        cfg["LOG_LEVEL"] = log_level.upper()

    return cfg
