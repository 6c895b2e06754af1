from __future__ import annotations

from pathlib import Path

import pytest

from synth_weaver.config import DATA_ENV_VAR, LEVEL_ENV_VAR
from synth_weaver.progress import LevelProgress
from synth_weaver.storage import PreferencesStore
from synth_weaver.ui.main import bootstrap_directories, main


@pytest.fixture(autouse=True)
def isolated_data(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.setenv(DATA_ENV_VAR, str(tmp_path))
    return tmp_path


def test_bootstrap_prints_message(capsys: pytest.CaptureFixture[str]):
    directories = bootstrap_directories()
    output = capsys.readouterr().out

    assert "Synth Weaver bootstrap" in output
    assert str(directories.level_root) in output
    assert str(directories.data_root) in output


def test_cli_info(capsys: pytest.CaptureFixture[str]):
    assert main(["--info"]) == 0
    assert "Synth Weaver bootstrap" in capsys.readouterr().out


def test_cli_lists_levels(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--list-levels"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Available levels" in output
    assert "01 First Thread [unlocked]" in output
    assert "16 Ultimate Balance [locked]" in output


def test_cli_describes_current_level(capsys: pytest.CaptureFixture[str]):
    assert main([]) == 0
    output = capsys.readouterr().out

    assert "Level 01: First Thread" in output
    assert "source    (1, 1) capacity 2" in output


def test_cli_refuses_locked_level(capsys: pytest.CaptureFixture[str]):
    assert main(["--level", "5"]) == 1
    assert "Level 5 is locked" in capsys.readouterr().out


def test_cli_reset_progress(isolated_data: Path, capsys: pytest.CaptureFixture[str]):
    progress = LevelProgress(PreferencesStore(isolated_data))
    progress.unlock_next_level(after=1)

    assert main(["--reset", "--list-levels"]) == 0
    output = capsys.readouterr().out

    assert "Progress reset." in output
    assert "02 Obstacles [locked]" in output
    assert LevelProgress(PreferencesStore(isolated_data)).unlocked_levels == 1


def test_demo_replays_solution(capsys: pytest.CaptureFixture[str]):
    from synth_weaver import demo

    demo.main(5)
    output = capsys.readouterr().out

    assert "Level: 5 (Amplifiers)" in output
    assert "amplifier (3, 3): 3/4" in output
    assert "Threads woven: 3" in output
    assert "Completed: True" in output
