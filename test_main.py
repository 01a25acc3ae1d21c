import pytest

import config_paths
import coordinates
import main
from errors import UsageError


@pytest.mark.parametrize(
    "args, expected",
    [
        ([], ({"separator": None, "filename": None}, "run")),
        (["data.csv"], ({"separator": None, "filename": "data.csv"}, "run")),
        (["-s", ";", "data.csv"], ({"separator": ";", "filename": "data.csv"}, "run")),
        (["-"], ({"separator": None, "filename": None}, "run")),
        (["--help"], ({"separator": None, "filename": None}, "help")),
        (["-h"], ({"separator": None, "filename": None}, "help")),
        (["--version"], ({"separator": None, "filename": None}, "version")),
    ],
)
def test_parse_args(args, expected):
    assert main.parse_args(args) == expected


@pytest.mark.parametrize(
    "args, message",
    [
        (["-s"], "Argument expected for the -s option."),
        (["-s", ";;"], "Separator must be a single character."),
        (["-x"], "Unrecognized switch: `x'"),
        (["--nope"], "Unrecognized switch: --nope"),
        (["a.csv", "b.csv"], "Too many arguments given."),
        (["-", "file.csv"], "Too many arguments given."),
    ],
)
def test_parse_args_errors(args, message):
    with pytest.raises(UsageError) as excinfo:
        main.parse_args(args)
    assert str(excinfo.value) == message


def test_main_version(capsys):
    assert main.main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == f"Levite {main.__version__}"


def test_main_help(capsys):
    assert main.main(["--help"]) == 0
    assert "-s separator" in capsys.readouterr().out


def test_main_usage_error(capsys):
    assert main.main(["-q"]) == 1
    err = capsys.readouterr().err
    assert "Unrecognized switch" in err
    assert "Usage:" in err


@pytest.fixture
def cfg(tmp_path, monkeypatch):
    monkeypatch.setattr(config_paths, "HISTORY_PATH", str(tmp_path / "history.log"))
    return {"SEPARATOR": ",", "CELL_WIDTH": 8, "HISTORY_SIZE": 10, "LOG_LEVEL": "WARNING"}


def test_build_session_new_file(tmp_path, cfg):
    path = tmp_path / "new.csv"
    session = main.build_session({"separator": None, "filename": str(path)}, cfg)
    assert session.message == f'"{path}" [New]'
    assert session.sheet.filename == str(path)
    assert session.viewport.cell_width == 8
    assert len(session.sheet) == 0


def test_build_session_loads_existing_file(tmp_path, cfg):
    path = tmp_path / "data.csv"
    path.write_text("1;=A1*3\n", encoding="utf-8")
    session = main.build_session({"separator": ";", "filename": str(path)}, cfg)
    assert session.message == f'"{path}" loaded'
    assert session.sheet.separator == ";"
    assert session.sheet.evaluate(coordinates.parse("B1")) == 3
    assert not session.sheet.modified


def test_build_session_unreadable_file(tmp_path, cfg):
    path = tmp_path / "wide.csv"
    path.write_text(",".join("x" * 30) + "\n", encoding="utf-8")
    session = main.build_session({"separator": None, "filename": str(path)}, cfg)
    assert session.message == f'Cannot read "{path}"'
