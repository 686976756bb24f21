# src/fastturbo/config.py
from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError, InvalidPackageManagerError, InvalidProjectNameError
from .models import PackageManager
from .validation import ProjectValidator


class UserConfig(BaseModel):
    """User defaults for project creation."""

    default_package_manager: PackageManager = PackageManager.PNPM
    default_project_name: str = "my-app"
    install_dependencies: bool = True
    install_timeout: float = Field(default=5.0, gt=0)
    quiet_mode: bool = False

    @field_validator("default_project_name")
    @classmethod
    def validate_default_project_name(cls, v: str) -> str:
        v = v.strip()
        try:
            ProjectValidator.validate_project_name(v)
        except InvalidProjectNameError as e:
            raise ValueError(str(e)) from e
        return v

    @classmethod
    def get_config_paths(cls) -> list[Path]:
        """Get possible configuration file locations in order of precedence."""
        paths = []

        # 1. Environment variable override
        if env_path := os.getenv("FASTTURBO_CONFIG"):
            paths.append(Path(env_path))

        # 2. Current directory
        paths.append(Path.cwd() / ".fastturbo.yml")

        # 3. User config directory (XDG Base Directory)
        if xdg_config := os.getenv("XDG_CONFIG_HOME"):
            paths.append(Path(xdg_config) / "fastturbo" / "config.yml")
        else:
            paths.append(Path.home() / ".config" / "fastturbo" / "config.yml")

        # 4. Home directory fallback
        paths.append(Path.home() / ".fastturbo.yml")

        return paths

    @classmethod
    def load(cls) -> UserConfig:
        """Load config from standard locations."""
        for config_path in cls.get_config_paths():
            if config_path.exists():
                try:
                    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
                    if data is None:
                        continue  # Empty file
                    return cls.model_validate(data)
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}") from e
                except Exception as e:
                    raise ConfigurationError(f"Error reading config file {config_path}: {e}") from e

        # No config found, return defaults
        return cls()

    def save(self, path: Optional[Path] = None) -> Path:
        """Save config to file."""
        if path is None:
            path = self.default_save_path()

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            config_data = self.model_dump(mode="json")
            yaml_content = yaml.dump(config_data, default_flow_style=False, sort_keys=True, indent=2)
            path.write_text(yaml_content, encoding="utf-8")
            return path

        except Exception as e:
            raise ConfigurationError(f"Failed to save config to {path}: {e}") from e

    @classmethod
    def default_save_path(cls) -> Path:
        # Skip environment variable and current directory, use user config
        config_paths = cls.get_config_paths()
        return config_paths[-2]

    def get_effective_config_path(self) -> Optional[Path]:
        """Get the path of the config file that would be loaded."""
        for config_path in self.get_config_paths():
            if config_path.exists():
                return config_path
        return None

    def update_setting(self, key: str, value: str) -> None:
        """Update a single configuration setting from its string form."""
        if key not in self.__class__.model_fields:
            available_keys = list(self.__class__.model_fields.keys())
            raise ConfigurationError(f"Unknown config key '{key}'. Available keys: {', '.join(available_keys)}")

        field_type = self.__class__.model_fields[key].annotation

        try:
            if field_type in (bool, "bool"):
                if value.lower() in ("true", "yes", "1", "on"):
                    converted = True
                elif value.lower() in ("false", "no", "0", "off"):
                    converted = False
                else:
                    raise ValueError(f"Invalid boolean value: {value}")
            elif field_type in (PackageManager, "PackageManager"):
                converted = PackageManager.parse(value)
            else:
                converted = value

            updated = self.model_validate({**self.model_dump(), key: converted})
        except (ValueError, ValidationError, InvalidPackageManagerError) as e:
            raise ConfigurationError(f"Invalid value '{value}' for config key '{key}': {e}") from e

        setattr(self, key, getattr(updated, key))


class ConfigManager:
    """Manages configuration operations."""

    @staticmethod
    def initialize_config(path: Optional[Path] = None, overwrite: bool = False) -> Path:
        """Write a configuration file holding the defaults."""
        config = UserConfig()

        if path is None:
            path = UserConfig.default_save_path()

        if path.exists() and not overwrite:
            raise ConfigurationError(f"Config file already exists: {path}")

        return config.save(path)

    @staticmethod
    def show_config_info() -> dict:
        """Show information about current configuration."""
        config = UserConfig.load()
        effective_path = config.get_effective_config_path()

        return {
            "config": config.model_dump(mode="json"),
            "config_file": str(effective_path) if effective_path else "None (using defaults)",
            "search_paths": [str(p) for p in UserConfig.get_config_paths()],
        }
