# src/fastturbo/scaffolder.py
from __future__ import annotations
import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .configurator import configure, copy_npmrc
from .exceptions import CleanupError, ConfigurationError, FastTurboError, ScaffoldError
from .ignore import DEFAULT_IGNORE_RULES, IgnoreRules
from .materializer import materialize
from .models import PackageManager, ProjectConfig, ScaffoldResult
from .validation import ProjectValidator, TemplateValidator

logger = logging.getLogger(__name__)

BUNDLED_TEMPLATE = Path(__file__).parent / "templates" / "basic"


class ProjectScaffolder(BaseModel):
    """Creates a monorepo from the bundled template."""

    model_config = {"arbitrary_types_allowed": True}

    template_root: Path = Field(default=BUNDLED_TEMPLATE)
    ignore_rules: IgnoreRules = Field(default=DEFAULT_IGNORE_RULES)

    def validate_template(self) -> Path:
        return TemplateValidator.validate_template_path(self.template_root)

    def scaffold(
        self,
        project_name: str,
        package_manager: PackageManager | str = PackageManager.PNPM,
        parent_dir: Optional[Path] = None,
    ) -> ScaffoldResult:
        """Materialize the template into ``parent_dir/project_name`` and configure it.

        The destination must not exist. If copying or configuring fails, the
        partially written destination is removed before the error propagates.
        """
        template_root = self.validate_template()
        config = ProjectConfig(project_name=project_name, package_manager=package_manager)
        destination = (parent_dir or Path.cwd()) / config.project_name
        ProjectValidator.validate_destination(destination)

        try:
            materialize(template_root, destination, self.ignore_rules)
            configure(destination, config.package_manager, config.project_name)
            copy_npmrc(template_root, destination)
        except Exception as e:
            if not isinstance(e, (ScaffoldError, ConfigurationError)):
                logger.debug("Unexpected error while scaffolding %s: %r", destination, e)
            try:
                cleaned_up = self.cleanup(destination)
            except CleanupError as cleanup_error:
                if isinstance(e, FastTurboError):
                    e.cleanup_error = cleanup_error
            else:
                if isinstance(e, FastTurboError):
                    e.cleaned_up = cleaned_up
            raise

        logger.debug("Scaffolded %s into %s", config.project_name, destination)
        return ScaffoldResult(
            destination=destination,
            project_name=config.project_name,
            package_manager=config.package_manager,
            template_root=template_root,
        )

    @staticmethod
    def cleanup(destination: Path) -> bool:
        """Remove a partially created project. Returns False if there was nothing to remove."""
        if not destination.exists():
            return False
        try:
            shutil.rmtree(destination)
        except OSError as e:
            logger.warning("Could not clean up %s: %s", destination, e)
            raise CleanupError(destination, original_error=e) from e
        logger.debug("Removed partial project %s", destination)
        return True


def describe_structure(destination: Path, depth: int = 2) -> Dict[str, List[str]]:
    """Map each top-level entry of the project to its children (directories only recurse)."""
    structure: Dict[str, List[str]] = {}
    for entry in sorted(destination.iterdir(), key=lambda p: (not p.is_dir(), p.name)):
        if entry.is_dir():
            children = sorted(c.name + ("/" if c.is_dir() else "") for c in entry.iterdir()) if depth > 1 else []
            structure[entry.name + "/"] = children
        else:
            structure[entry.name] = []
    return structure
