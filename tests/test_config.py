"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from bookingslots.config import AppConfig, HostConfig, TemplateConfig


def _write(tmp_path: Path, text: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


class TestTemplateConfig:
    """Tests for template validation."""

    def test_defaults(self):
        template = TemplateConfig(name="Intro", slug="intro")

        assert template.duration == 30
        assert template.days_of_week == [1, 2, 3, 4, 5]
        assert template.start_time == "09:00"
        assert template.end_time == "17:00"

    def test_days_are_deduplicated_and_sorted(self):
        template = TemplateConfig(name="Intro", slug="intro", days_of_week=[5, 1, 5, 3])

        assert template.days_of_week == [1, 3, 5]

    @pytest.mark.parametrize("days", [[], [0], [8], [1, 9]])
    def test_invalid_days_rejected(self, days):
        with pytest.raises(ValidationError):
            TemplateConfig(name="Intro", slug="intro", days_of_week=days)

    def test_times_are_normalised(self):
        template = TemplateConfig(name="Intro", slug="intro", start_time="8:00", end_time="9:30")

        assert template.start_time == "08:00"
        assert template.end_time == "09:30"

    def test_malformed_time_rejected(self):
        with pytest.raises(ValidationError, match="HH:MM"):
            TemplateConfig(name="Intro", slug="intro", start_time="9am")

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError, match="end_time must be later than start_time"):
            TemplateConfig(name="Intro", slug="intro", start_time="17:00", end_time="09:00")

    @pytest.mark.parametrize("duration", [0, -15])
    def test_non_positive_duration_rejected(self, duration):
        with pytest.raises(ValidationError, match="duration must be greater than zero"):
            TemplateConfig(name="Intro", slug="intro", duration=duration)

    def test_unknown_location_rejected(self):
        with pytest.raises(ValidationError, match="location must be one of"):
            TemplateConfig(name="Intro", slug="intro", location="carrier-pigeon")

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValidationError):
            TemplateConfig(name="Intro", slug="intro", buffer_before=-5)


class TestAppConfig:
    """Tests for the application config."""

    def test_load_from_yaml(self, tmp_path):
        config_path = _write(tmp_path, """
timezone: Europe/Berlin
hosts:
  - username: alice
    first_name: Alice
    last_name: Example
    email: alice@example.com
    templates:
      - name: Intro
        slug: intro
        duration: 45
        days_of_week: [2, 4]
        start_time: "10:00"
        end_time: "12:00"
""")

        config = AppConfig.load_from_yaml(config_path)

        host = config.find_host("ALICE")
        assert host is not None
        assert config.host_timezone(host) == "Europe/Berlin"
        assert host.templates[0].duration == 45
        assert host.templates[0].days_of_week == [2, 4]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        config_path = _write(tmp_path, "hosts: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_non_mapping_root_rejected(self, tmp_path):
        config_path = _write(tmp_path, "- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping at the root level"):
            AppConfig.load_from_yaml(config_path)

    def test_empty_file_uses_defaults(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, ""))

        assert config.timezone == "America/New_York"
        assert config.hosts == []

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            AppConfig(timezone="Mars/Olympus_Mons")

    def test_duplicate_usernames_rejected(self):
        host = HostConfig(username="alice", first_name="A", last_name="E", email="a@example.com")

        with pytest.raises(ValidationError, match="Duplicate host username"):
            AppConfig(hosts=[host, host.model_copy(update={"username": "Alice"})])

    def test_duplicate_slugs_rejected(self):
        template = TemplateConfig(name="Intro", slug="intro")

        with pytest.raises(ValidationError, match="Duplicate template slug"):
            HostConfig(
                username="alice",
                first_name="A",
                last_name="E",
                email="a@example.com",
                templates=[template, template],
            )

    def test_host_timezone_overrides_default(self):
        host = HostConfig(
            username="alice", first_name="A", last_name="E",
            email="a@example.com", timezone="Asia/Tokyo",
        )
        config = AppConfig(hosts=[host])

        assert config.host_timezone(host) == "Asia/Tokyo"

    def test_demo_config(self):
        config = AppConfig.demo()

        host = config.find_host("janesmith")
        assert host is not None
        assert [t.slug for t in host.templates] == ["30min", "onboarding", "coffee"]
