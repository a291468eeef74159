"""
Tests for YAML configuration loading.
"""

from datetime import time

import pytest

from availabilityfinder.config import AppConfig, DefaultsConfig
from availabilityfinder.domain.exceptions import MissingIdentityError

CONFIG_YAML = """
timezone: America/New_York
defaults:
  duration_minutes: 30
  increment_minutes: 10
  start_time: "09:00"
  end_time: "17:30"
working_days: [0, 1, 1, 2]
store:
  type: json
  path: events.json
calendars:
  - name: Krissy
  - name: client
    calendar_id: acme_client
"""


def test_load_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")

    config = AppConfig.load_from_yaml(path)

    assert config.timezone == "America/New_York"
    assert config.defaults.duration_minutes == 30
    assert config.defaults.get_start_time() == time(9, 0)
    assert config.defaults.get_end_time() == time(17, 30)
    assert config.defaults.search_days == 7
    assert config.working_days == [0, 1, 2]
    assert config.store.type == "json"
    assert config.store.resolve_path(tmp_path) == tmp_path / "events.json"


def test_defaults_without_file_content(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    config = AppConfig.load_from_yaml(path)

    assert config.timezone == "America/Los_Angeles"
    assert config.defaults.duration_minutes == 60
    assert config.defaults.increment_minutes == 15
    assert config.working_days == [0, 1, 2, 3, 4]
    assert config.store.type == "ics"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        AppConfig.load_from_yaml(tmp_path / "missing.yaml")


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("timezone: [unclosed", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(path)


def test_non_mapping_root_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping at the root"):
        AppConfig.load_from_yaml(path)


@pytest.mark.parametrize(
    "data",
    [
        {"timezone": "Mars/Olympus"},
        {"working_days": [7]},
        {"working_days": []},
        {"calendars": [{"name": "a"}, {"name": "A"}]},
        {"store": {"type": "caldav"}},
    ],
)
def test_invalid_values_raise(data):
    with pytest.raises(ValueError):
        AppConfig(**data)


@pytest.mark.parametrize(
    "data",
    [
        {"duration_minutes": 0},
        {"increment_minutes": -15},
        {"start_time": "8am"},
        {"start_time": "18:00", "end_time": "08:00"},
    ],
)
def test_invalid_defaults_raise(data):
    with pytest.raises(ValueError):
        DefaultsConfig(**data)


def test_resolve_identities(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    config = AppConfig.load_from_yaml(path)

    assert config.resolve_identities(["krissy", "CLIENT", "other", "Krissy", " "]) == [
        "Krissy",
        "acme_client",
        "other",
    ]


def test_resolve_identities_requires_one():
    with pytest.raises(MissingIdentityError, match="Name is required!"):
        AppConfig().resolve_identities([])
