"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.models import DEFAULT_APPOINTMENT_MINUTES


class StaffMember(BaseModel):
    """Staff member configuration."""
    name: str  # Used as alias
    staff_id: str

    def display_name(self) -> str:
        """Get display name."""
        return self.name


class AppConfig(BaseModel):
    """Application configuration."""
    api_base_url: str
    timezone: str = "Europe/Berlin"
    default_appointment_minutes: int = DEFAULT_APPOINTMENT_MINUTES
    request_timeout: int = 30
    staff: List[StaffMember] = Field(default_factory=list)

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"api_base_url must start with http:// or https://, got '{value}'")
        return value.rstrip("/")

    @field_validator("default_appointment_minutes", "request_timeout")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations are positive."""
        if value <= 0:
            raise ValueError("value must be greater than zero")
        return value

    @field_validator("staff")
    @classmethod
    def validate_staff(cls, value: List[StaffMember]) -> List[StaffMember]:
        """Ensure staff aliases and ids are unique."""
        seen_names: set[str] = set()
        seen_ids: set[str] = set()
        for member in value:
            name_key = member.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate staff name detected: {member.name}")
            if member.staff_id in seen_ids:
                raise ValueError(f"Duplicate staff id detected: {member.staff_id}")
            seen_names.add(name_key)
            seen_ids.add(member.staff_id)
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
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_staff_by_name(self, name: str) -> StaffMember | None:
        """Find a staff member by their name (alias)."""
        for member in self.staff:
            if member.name.lower() == name.lower():
                return member
        return None

    def find_staff_by_id(self, staff_id: str) -> StaffMember | None:
        """Find a staff member by their id."""
        for member in self.staff:
            if member.staff_id == staff_id:
                return member
        return None

    def resolve_staff(self, identifier: str) -> StaffMember:
        """
        Resolve a staff identifier (name/alias or id) to a staff member.

        Unknown identifiers are taken as raw staff ids, so staff that are
        not listed in the config can still be looked up.

        Raises:
            ValueError: If identifier is empty
        """
        identifier = identifier.strip()
        if not identifier:
            raise ValueError("No staff member provided.")

        member = self.find_staff_by_name(identifier) or self.find_staff_by_id(identifier)
        if member:
            return member

        return StaffMember(name=identifier, staff_id=identifier)


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
