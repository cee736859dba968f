import json

import pytest
from pydantic import ValidationError

from core.settings import (
    StudySettings,
    get_settings_path,
    load_settings,
    save_settings,
    set_max_new_per_day,
)


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "settings.json")

    assert settings == StudySettings()
    assert settings.max_new_per_day == 10
    assert settings.review_ahead is False
    assert settings.flush_batch_size == 5


def test_save_and_load(tmp_path):
    path = tmp_path / "nested" / "settings.json"

    save_settings(StudySettings(max_new_per_day=25, review_ahead=True), path)

    assert load_settings(path) == StudySettings(max_new_per_day=25, review_ahead=True)


def test_invalid_entries_are_dropped_individually(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_new_per_day": -3, "review_ahead": True, "colour": "blue"}))

    settings = load_settings(path)

    assert settings.max_new_per_day == 10
    assert settings.review_ahead is True


def test_unreadable_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")

    assert load_settings(path) == StudySettings()


def test_non_object_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]")

    assert load_settings(path) == StudySettings()


def test_set_max_new_per_day(tmp_path):
    path = tmp_path / "settings.json"

    set_max_new_per_day(30, path)

    assert load_settings(path).max_new_per_day == 30


def test_set_max_new_per_day_rejects_negative(tmp_path):
    path = tmp_path / "settings.json"

    with pytest.raises(ValidationError):
        set_max_new_per_day(-1, path)

    assert not path.exists()


def test_settings_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("SETTINGS_PATH", str(tmp_path / "custom.json"))

    assert get_settings_path() == tmp_path / "custom.json"
