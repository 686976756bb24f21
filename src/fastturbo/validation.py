# src/fastturbo/validation.py
from __future__ import annotations
import re
from pathlib import Path

from .exceptions import (
    InvalidProjectNameError,
    ProjectExistsError,
    TemplateNotFoundError,
    TemplateValidationError,
)


class TemplateValidator:
    """Validates template structure."""

    REQUIRED_DIRS = ["apps", "packages"]

    @classmethod
    def validate_template(cls, template_path: Path) -> None:
        """Validate template has required structure."""
        if not template_path.exists():
            raise TemplateNotFoundError(template_path)

        if not template_path.is_dir():
            raise TemplateValidationError(f"Template path is not a directory: {template_path}", template_path)

        for name in cls.REQUIRED_DIRS:
            if not (template_path / name).is_dir():
                raise TemplateValidationError(f"Required directory missing: {name}", template_path)

    @classmethod
    def validate_template_path(cls, template_path: str | Path) -> Path:
        """Validate and normalize template path."""
        path = Path(template_path)

        # Handle relative paths
        if not path.is_absolute():
            path = Path.cwd() / path

        cls.validate_template(path)
        return path


class ProjectValidator:
    """Validates project names and destinations."""

    NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")

    @classmethod
    def validate_project_name(cls, name: str) -> None:
        """Validate project name follows conventions."""
        if not name or not name.strip():
            raise InvalidProjectNameError("Project name cannot be empty")

        if not cls.NAME_RE.match(name.strip()):
            raise InvalidProjectNameError(
                "Project name can only contain letters, numbers, hyphens, and underscores"
            )

    @classmethod
    def validate_destination(cls, destination: Path) -> None:
        """Refuse any destination that already exists, file or directory."""
        if destination.exists() or destination.is_symlink():
            raise ProjectExistsError(destination)
