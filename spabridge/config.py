"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_NAME = "spabridge.yaml"


class BridgeConfig(BaseModel):
    """Settings for reading and writing the sp-automatisch files."""
    delimiter: str = ";"
    encoding: str = "utf-8"
    result_directory: str = "SPA-ERGEBNIS-PP"
    excluded_origins: List[str] = Field(default_factory=lambda: ["EIT"])  # planned elsewhere
    date_format: str = "DD.MM.YYYY"  # pendulum tokens
    skip_comments: bool = True
    add_missing_groups: bool = True
    cross_check_group_results: bool = True

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, value: str) -> str:
        """Ensure the delimiter is a single character."""
        if len(value) != 1:
            raise ValueError(f"delimiter must be a single character, got {value!r}")
        if value in ('"', "\n", "\r"):
            raise ValueError(f"delimiter {value!r} cannot be used")
        return value

    @field_validator("result_directory")
    @classmethod
    def validate_result_directory(cls, value: str) -> str:
        """Ensure the result directory is a plain directory name."""
        value = value.strip()
        if not value or value in (".", ".."):
            raise ValueError("result_directory must not be empty")
        if "/" in value or "\\" in value:
            raise ValueError(f"result_directory must be a single directory name, got {value!r}")
        return value

    @field_validator("excluded_origins")
    @classmethod
    def validate_excluded_origins(cls, value: List[str]) -> List[str]:
        """Strip origin tags and drop duplicates."""
        deduped: List[str] = []
        for origin in value:
            origin = origin.strip()
            if origin and origin not in deduped:
                deduped.append(origin)
        return deduped

    def is_excluded(self, origin: str) -> bool:
        """Check whether modules of this origin are left out of the request files."""
        return origin in self.excluded_origins

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "BridgeConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            BridgeConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for spabridge.yaml in current directory
    config_path = Path.cwd() / DEFAULT_CONFIG_NAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / DEFAULT_CONFIG_NAME

    return config_path


def load_config(config_path: Path | None = None) -> BridgeConfig:
    """
    Load the given config file, or the default one if it exists.

    Without an explicit path a missing default file yields the built-in defaults.
    """
    if config_path is not None:
        return BridgeConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return BridgeConfig.load_from_yaml(default_path)
    return BridgeConfig()
