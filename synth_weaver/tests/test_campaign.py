from pathlib import Path

import pytest

from synth_weaver.campaign import Campaign, LevelLockedError, LevelNotCompleteError
from synth_weaver.config import DATA_ENV_VAR, LEVEL_ENV_VAR, WeaverDirectories, resolve_directories
from synth_weaver.game import LevelLoader, SolutionValidator, default_level_root
from synth_weaver.storage import PreferencesStore


@pytest.fixture
def campaign(tmp_path: Path) -> Campaign:
    directories = WeaverDirectories(level_root=default_level_root(), data_root=tmp_path)
    return Campaign(directories)


def solve_current(campaign: Campaign) -> None:
    validator = SolutionValidator(campaign.loader)
    validator.apply_solution(campaign.game, validator.load_solution(campaign.game.current_level))


def test_locked_level_cannot_be_started(campaign: Campaign):
    with pytest.raises(LevelLockedError) as excinfo:
        campaign.start_level(2)

    assert excinfo.value.level == 2
    assert excinfo.value.unlocked == 1


def test_incomplete_level_cannot_be_recorded(campaign: Campaign):
    campaign.start_level(1)

    with pytest.raises(LevelNotCompleteError):
        campaign.complete_level()


def test_completing_first_level_updates_every_holder(campaign: Campaign):
    campaign.start_level(1)
    solve_current(campaign)

    result = campaign.complete_level()

    assert result.level == 1
    assert result.unlocked_next
    assert result.achievements == ["first_weave"]
    assert result.next_level == 2
    assert not result.finished
    assert campaign.progress.unlocked_levels == 2
    assert len(campaign.gallery) == 1
    assert campaign.gallery.saved_patterns[0].level_number == 1
    assert campaign.game.current_level == 2
    assert campaign.game.connections == []


def test_replaying_an_old_level_does_not_unlock(campaign: Campaign):
    for _ in range(3):
        solve_current(campaign)
        campaign.complete_level()
    assert campaign.progress.unlocked_levels == 4

    campaign.start_level(2)
    solve_current(campaign)
    result = campaign.complete_level()

    assert not result.unlocked_next
    assert campaign.progress.unlocked_levels == 4
    assert len(campaign.gallery) == 4


def test_full_campaign_run(tmp_path: Path):
    directories = WeaverDirectories(level_root=default_level_root(), data_root=tmp_path)
    campaign = Campaign(directories)

    results = []
    for _ in range(16):
        solve_current(campaign)
        results.append(campaign.complete_level())

    assert results[-1].finished
    assert results[-1].level == 16
    assert campaign.game.current_level == 16
    assert campaign.progress.unlocked_levels == 16
    assert len(campaign.gallery) == 16
    assert [p.level_number for p in campaign.gallery][0] == 16
    assert campaign.achievements.unlocked_count == 5
    assert not campaign.achievements.get("energy_saver").is_unlocked

    reopened = Campaign(directories)
    assert reopened.progress.unlocked_levels == 16
    assert len(reopened.gallery) == 16
    assert reopened.achievements.unlocked_count == 5


def test_campaign_accepts_injected_store(tmp_path: Path):
    directories = WeaverDirectories(level_root=default_level_root(), data_root=tmp_path)
    campaign = Campaign(directories, store=PreferencesStore())

    solve_current(campaign)
    campaign.complete_level()

    assert not list(tmp_path.iterdir())


def test_resolve_directories_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(DATA_ENV_VAR, raising=False)

    directories = resolve_directories()

    assert directories.level_root == default_level_root()
    assert directories.data_root.name == ".synth_weaver"


def test_resolve_directories_honours_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    level_dir = tmp_path / "levels"
    level_dir.mkdir()
    monkeypatch.setenv(LEVEL_ENV_VAR, str(level_dir))
    monkeypatch.setenv(DATA_ENV_VAR, str(tmp_path / "save"))

    directories = resolve_directories()

    assert directories.level_root == level_dir
    assert directories.data_root == tmp_path / "save"


def test_resolve_directories_errors_on_missing_levels(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(LEVEL_ENV_VAR, str(tmp_path / "missing_levels"))

    with pytest.raises(FileNotFoundError):
        resolve_directories()

    assert resolve_directories(check_exists=False).level_root == tmp_path / "missing_levels"


def test_custom_level_root_is_used(tmp_path: Path):
    level_dir = tmp_path / "levels"
    level_dir.mkdir()
    source = default_level_root() / LevelLoader.filename(1)
    (level_dir / source.name).write_text(source.read_text().replace("First Thread", "Custom"))

    campaign = Campaign(WeaverDirectories(level_root=level_dir, data_root=tmp_path / "data"))

    assert campaign.game.level.name == "Custom"
