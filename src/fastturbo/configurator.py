# src/fastturbo/configurator.py
"""Adapt a freshly materialized project to the chosen package manager."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .exceptions import ConfigurationError
from .models import ENV_DOTFILE, MANIFEST_FILE, WORKSPACE_FILE, PackageManager, ProjectManifest

logger = logging.getLogger(__name__)


def configure(dest_root: Path | str, package_manager: PackageManager | str, project_name: str) -> None:
    """Rewrite ``package.json`` and the pnpm workspace file for ``package_manager``.

    The manifest is loaded, mutated in memory and written once, so a failure
    never leaves it half-updated. A missing manifest is not an error.

    Raises:
        ConfigurationError: if the manifest cannot be read, parsed or written,
            or the workspace file cannot be removed.
    """
    dest_root = Path(dest_root)
    package_manager = PackageManager.parse(package_manager)

    manifest_path = dest_root / MANIFEST_FILE
    if manifest_path.exists():
        manifest = ProjectManifest.load(manifest_path)
        manifest.apply(package_manager, project_name)
        manifest.save(manifest_path)
        logger.debug("Updated %s for %s", manifest_path, package_manager.value)
    else:
        logger.debug("No %s in %s, skipping manifest update", MANIFEST_FILE, dest_root)

    if not package_manager.uses_workspace_file:
        remove_workspace_file(dest_root)


def remove_workspace_file(dest_root: Path) -> bool:
    """Delete the pnpm workspace declaration if present."""
    workspace_path = dest_root / WORKSPACE_FILE
    if not workspace_path.exists():
        return False
    try:
        workspace_path.unlink()
    except OSError as e:
        raise ConfigurationError(f"Failed to remove {workspace_path}: {e}", original_error=e) from e
    logger.debug("Removed %s", workspace_path)
    return True


def copy_npmrc(template_root: Path | str, dest_root: Path | str) -> bool:
    """Copy ``.npmrc`` verbatim from the template root, whatever the package manager."""
    source = Path(template_root) / ENV_DOTFILE
    if not source.is_file():
        return False
    target = Path(dest_root) / ENV_DOTFILE
    try:
        shutil.copy(source, target)
    except OSError as e:
        raise ConfigurationError(f"Failed to copy {ENV_DOTFILE}: {e}", original_error=e) from e
    return True
