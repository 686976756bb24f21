# src/fastturbo/exceptions.py
from __future__ import annotations
from pathlib import Path


class FastTurboError(Exception):
    """Base exception for fastturbo errors."""

    # Set by the scaffolder when it removes (or fails to remove) a partial project
    cleaned_up: bool = False
    cleanup_error: CleanupError | None = None


class TemplateNotFoundError(FastTurboError):
    """Template root not found or inaccessible."""
    def __init__(self, template_path: str | Path):
        self.template_path = template_path
        super().__init__(f"Template directory not found: {template_path}")


class TemplateValidationError(TemplateNotFoundError):
    """Template root is not a directory or lacks a required subdirectory."""
    def __init__(self, message: str, template_path: str | Path | None = None):
        self.template_path = template_path
        FastTurboError.__init__(self, message)


class ProjectExistsError(FastTurboError):
    """Target directory already exists."""
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Directory '{path.name}' already exists")


class InvalidProjectNameError(FastTurboError):
    """Project name is invalid."""
    pass


class InvalidPackageManagerError(FastTurboError):
    """Unsupported package manager."""
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Unsupported package manager '{value}' (choose npm, pnpm or yarn)")


class ScaffoldError(FastTurboError):
    """I/O failure while materializing the template."""
    def __init__(self, message: str, original_error: Exception | None = None):
        self.original_error = original_error
        super().__init__(message)


class ConfigurationError(FastTurboError):
    """Manifest or configuration file could not be read, parsed or written."""
    def __init__(self, message: str, original_error: Exception | None = None):
        self.original_error = original_error
        super().__init__(message)


class CleanupError(FastTurboError):
    """Partially created project could not be removed."""
    def __init__(self, path: Path, original_error: Exception | None = None):
        self.path = path
        self.original_error = original_error
        super().__init__(f"Could not clean up {path}")


class InstallationError(FastTurboError):
    """Dependency installation failed. Never fatal."""
    pass
