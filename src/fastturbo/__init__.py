# src/fastturbo/__init__.py
from __future__ import annotations

__all__ = [
    "__version__",
    "PackageManager",
    "ProjectConfig",
    "ProjectManifest",
    "ScaffoldResult",
    "IgnoreRule",
    "IgnoreRules",
    "DEFAULT_IGNORE_RULES",
    "materialize",
    "configure",
    "copy_npmrc",
    "ProjectScaffolder",
    "UserConfig",
    "ConfigManager",
    "FastTurboError",
    "TemplateNotFoundError",
    "TemplateValidationError",
    "ProjectExistsError",
    "InvalidProjectNameError",
    "InvalidPackageManagerError",
    "ScaffoldError",
    "ConfigurationError",
    "CleanupError",
    "InstallationError",
]
__version__ = "0.1.0"

from .models import PackageManager, ProjectConfig, ProjectManifest, ScaffoldResult
from .ignore import IgnoreRule, IgnoreRules, DEFAULT_IGNORE_RULES
from .materializer import materialize
from .configurator import configure, copy_npmrc
from .scaffolder import ProjectScaffolder
from .config import UserConfig, ConfigManager
from .exceptions import (
    FastTurboError,
    TemplateNotFoundError,
    TemplateValidationError,
    ProjectExistsError,
    InvalidProjectNameError,
    InvalidPackageManagerError,
    ScaffoldError,
    ConfigurationError,
    CleanupError,
    InstallationError,
)
