# src/fastturbo/models.py
from __future__ import annotations
import enum
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator

from .exceptions import ConfigurationError, InvalidPackageManagerError
from .validation import ProjectValidator

MANIFEST_FILE = "package.json"
WORKSPACE_FILE = "pnpm-workspace.yaml"
ENV_DOTFILE = ".npmrc"

YARN_WORKSPACES = ["apps/*", "packages/*"]


class PackageManager(str, enum.Enum):
    """Supported JavaScript package managers."""

    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"

    @classmethod
    def default(cls) -> PackageManager:
        return cls.PNPM

    @classmethod
    def parse(cls, value: str | PackageManager) -> PackageManager:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidPackageManagerError(str(value)) from None

    @property
    def pinned_version(self) -> Optional[str]:
        """Value written to the manifest's ``packageManager`` field."""
        return {
            PackageManager.PNPM: "pnpm@9.0.0",
            PackageManager.YARN: "yarn@4.0.0",
        }.get(self)

    @property
    def install_command(self) -> List[str]:
        # yarn installs when run bare
        if self is PackageManager.YARN:
            return ["yarn"]
        return [self.value, "install"]

    @property
    def uses_workspace_file(self) -> bool:
        return self is PackageManager.PNPM

    @property
    def label(self) -> str:
        return "pnpm (recommended)" if self is PackageManager.PNPM else self.value


class ProjectManifest:
    """Read-modify-write view over a ``package.json`` mapping.

    Keys keep their original order; fields this class does not know about
    are preserved untouched.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(data or {})

    @classmethod
    def loads(cls, text: str) -> ProjectManifest:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in manifest: {e}", original_error=e) from e
        if not isinstance(data, dict):
            raise ConfigurationError("Manifest must be a JSON object")
        return cls(data)

    @classmethod
    def load(cls, path: Path) -> ProjectManifest:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Error reading manifest {path}: {e}", original_error=e) from e
        return cls.loads(text)

    def dumps(self) -> str:
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"

    def save(self, path: Path) -> None:
        try:
            path.write_text(self.dumps(), encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Failed to write manifest {path}: {e}", original_error=e) from e

    @property
    def name(self) -> Optional[str]:
        return self.data.get("name")

    @name.setter
    def name(self, value: str) -> None:
        self.data["name"] = value

    @property
    def package_manager(self) -> Optional[str]:
        return self.data.get("packageManager")

    @package_manager.setter
    def package_manager(self, value: Optional[str]) -> None:
        if value is None:
            self.data.pop("packageManager", None)
        else:
            self.data["packageManager"] = value

    @property
    def workspaces(self) -> Optional[Any]:
        return self.data.get("workspaces")

    @workspaces.setter
    def workspaces(self, value: List[str]) -> None:
        self.data["workspaces"] = list(value)

    def apply(self, package_manager: PackageManager, project_name: str) -> ProjectManifest:
        """Rewrite name and package-manager metadata in place."""
        self.name = project_name
        if package_manager is PackageManager.NPM:
            self.package_manager = None
        elif package_manager is PackageManager.YARN:
            self.package_manager = package_manager.pinned_version
            self.workspaces = YARN_WORKSPACES
        else:
            self.package_manager = package_manager.pinned_version
        return self


class ProjectConfig(BaseModel):
    """Inputs for a single scaffold run."""

    project_name: str
    package_manager: PackageManager = PackageManager.PNPM

    @field_validator("project_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        ProjectValidator.validate_project_name(v)
        return v

    @field_validator("package_manager", mode="before")
    @classmethod
    def parse_package_manager(cls, v: Any) -> PackageManager:
        return PackageManager.parse(v)


class ScaffoldResult(BaseModel):
    """Outcome of a successful scaffold."""

    destination: Path
    project_name: str
    package_manager: PackageManager
    template_root: Path

    @property
    def next_steps(self) -> List[str]:
        pm = self.package_manager.value
        return [f"cd {self.project_name}", f"{pm} install", f"{pm} dev"]
