"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import parse_clock_time

LOCATIONS = ("zoom", "google-meet", "ms-teams", "phone", "in-person")


class TemplateConfig(BaseModel):
    """Meeting template configuration."""
    name: str
    slug: str
    description: Optional[str] = None
    duration: int = 30
    location: str = "zoom"
    days_of_week: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])  # Monday-Friday
    start_time: str = "09:00"
    end_time: str = "17:00"
    buffer_before: int = 0
    buffer_after: int = 0
    collect_phone: bool = False
    notify_on_booking: bool = True
    notify_cancellation: bool = True
    notify_reminder: bool = True
    is_default: bool = False

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure meeting duration is positive."""
        if value <= 0:
            raise ValueError("duration must be greater than zero")
        return value

    @field_validator("buffer_before", "buffer_after")
    @classmethod
    def validate_buffer(cls, value: int) -> int:
        if value < 0:
            raise ValueError("buffers cannot be negative")
        return value

    @field_validator("location")
    @classmethod
    def validate_location(cls, value: str) -> str:
        if value not in LOCATIONS:
            raise ValueError(f"location must be one of {', '.join(LOCATIONS)}, got '{value}'")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock_time(cls, value: str) -> str:
        """Validate the HH:MM format and normalise to zero-padded form."""
        parsed = parse_clock_time(value)
        return parsed.strftime("%H:%M")

    @field_validator("days_of_week")
    @classmethod
    def validate_days_of_week(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in 1..7 and deduplicated."""
        if not value:
            raise ValueError("days_of_week must contain at least one day")
        invalid_days = [day for day in value if day not in range(1, 8)]
        if invalid_days:
            raise ValueError(f"days_of_week must be between 1 and 7, got {invalid_days}")
        return sorted(set(value))

    @model_validator(mode="after")
    def validate_hours_order(self) -> "TemplateConfig":
        """Ensure the daily window opens before it closes."""
        if parse_clock_time(self.end_time) <= parse_clock_time(self.start_time):
            raise ValueError("end_time must be later than start_time")
        return self


class HostConfig(BaseModel):
    """Host (template owner) configuration."""
    username: str
    first_name: str
    last_name: str
    email: str
    timezone: Optional[str] = None  # Falls back to AppConfig.timezone
    calendar_url: Optional[str] = None
    auto_sync: bool = True
    templates: List[TemplateConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            validate_timezone_name(value)
        return value

    @field_validator("templates")
    @classmethod
    def validate_templates(cls, value: List[TemplateConfig]) -> List[TemplateConfig]:
        """Ensure template slugs are unique per host."""
        seen: set[str] = set()
        for template in value:
            if template.slug in seen:
                raise ValueError(f"Duplicate template slug detected: {template.slug}")
            seen.add(template.slug)
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/New_York"
    sender_email: str = "notifications@bookingslots.local"
    mock_calendar_file: Optional[Path] = None
    hosts: List[HostConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        return validate_timezone_name(value)

    @field_validator("hosts")
    @classmethod
    def validate_hosts(cls, value: List[HostConfig]) -> List[HostConfig]:
        """Ensure host usernames are unique."""
        seen: set[str] = set()
        for host in value:
            key = host.username.lower()
            if key in seen:
                raise ValueError(f"Duplicate host username detected: {host.username}")
            seen.add(key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file or run without --config to use the demo data."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def demo(cls) -> "AppConfig":
        """Built-in demo configuration with one host and three templates."""
        return cls(
            timezone="Europe/Paris",
            hosts=[
                HostConfig(
                    username="janesmith",
                    first_name="Jane",
                    last_name="Smith",
                    email="jane.smith@example.com",
                    timezone="Europe/Paris",
                    templates=[
                        TemplateConfig(
                            name="30 Minute Meeting",
                            slug="30min",
                            description="Let's discuss how I can help with your project "
                                        "or answer any questions you might have.",
                            duration=30,
                            days_of_week=[1, 2, 3, 4, 5],
                            start_time="09:00",
                            end_time="17:00",
                            is_default=True,
                        ),
                        TemplateConfig(
                            name="Client Onboarding",
                            slug="onboarding",
                            description="Initial client onboarding session to understand your needs.",
                            duration=45,
                            days_of_week=[2, 4],
                            start_time="10:00",
                            end_time="16:00",
                            buffer_before=5,
                            buffer_after=5,
                            collect_phone=True,
                        ),
                        TemplateConfig(
                            name="Coffee Chat",
                            slug="coffee",
                            description="Quick chat over virtual coffee.",
                            duration=15,
                            days_of_week=[1, 3, 5],
                            start_time="09:00",
                            end_time="10:00",
                            notify_reminder=False,
                        ),
                    ],
                )
            ],
        )

    def host_timezone(self, host: HostConfig) -> str:
        """Get the effective timezone of a host."""
        return host.timezone or self.timezone

    def find_host(self, username: str) -> HostConfig | None:
        """Find a host by username (case-insensitive)."""
        for host in self.hosts:
            if host.username.lower() == username.lower():
                return host
        return None


def validate_timezone_name(value: str) -> str:
    """Ensure a timezone name is a known IANA identifier."""
    try:
        pendulum.timezone(value)
    except Exception as exc:
        raise ValueError(f"Unknown timezone: '{value}'") from exc
    return value


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
