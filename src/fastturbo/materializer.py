# src/fastturbo/materializer.py
"""Copy a template tree into a new project, resolving symlinks into real content."""

from __future__ import annotations

import enum
import logging
import os
import shutil
from pathlib import Path
from typing import FrozenSet, Optional

from .exceptions import ScaffoldError
from .ignore import DEFAULT_IGNORE_RULES, IgnoreRules

logger = logging.getLogger(__name__)


class EntryKind(str, enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


def classify_entry(path: Path) -> EntryKind:
    """Classify a template entry without following links."""
    if path.is_symlink():
        return EntryKind.SYMLINK
    if path.is_dir():
        return EntryKind.DIRECTORY
    return EntryKind.FILE


def resolve_link(link: Path) -> Optional[Path]:
    """Resolve a symlink against its containing directory.

    Returns ``None`` for broken or unreadable links.
    """
    try:
        target = Path(os.path.normpath(link.parent / os.readlink(link)))
        if not target.exists():
            return None
        return target
    except OSError as e:
        logger.debug("Cannot resolve link %s: %s", link, e)
        return None


def materialize(
    source_root: Path | str,
    dest_root: Path | str,
    rules: IgnoreRules = DEFAULT_IGNORE_RULES,
) -> None:
    """Copy ``source_root`` into ``dest_root``, skipping ignored entries.

    Ignore rules see each entry's base name and its path relative to
    ``source_root``, at every depth. Symbolic links are replaced by a copy of
    what they point to; broken links are dropped. ``dest_root`` may already
    exist; callers that need a fresh directory check that themselves.

    Raises:
        ScaffoldError: if a directory or file cannot be created or copied.
    """
    source_root = Path(source_root)
    dest_root = Path(dest_root)
    try:
        _copy_tree(source_root, dest_root, source_root, frozenset({_real(source_root)}), rules)
    except OSError as e:
        raise ScaffoldError(f"Failed to scaffold template: {e}", original_error=e) from e


def _real(path: Path) -> str:
    return os.path.realpath(path)


def _copy_tree(
    src: Path,
    dest: Path,
    root: Path,
    ancestors: FrozenSet[str],
    rules: IgnoreRules,
) -> None:
    dest.mkdir(parents=True, exist_ok=True)

    for src_path in sorted(src.iterdir()):
        dest_path = dest / src_path.name
        relative_path = Path(os.path.relpath(src_path, root)).as_posix()

        rule = rules.match(src_path.name, relative_path)
        if rule is not None:
            logger.debug("Skipping %s (matches %r)", relative_path, rule.pattern)
            continue

        kind = classify_entry(src_path)

        if kind is EntryKind.SYMLINK:
            target = resolve_link(src_path)
            if target is None:
                logger.debug("Skipping broken link %s", relative_path)
                continue
            if target.is_dir():
                real = _real(target)
                if real in ancestors:
                    logger.warning("Skipping cyclic link %s -> %s", relative_path, target)
                    continue
                _copy_tree(target, dest_path, root, ancestors | {real}, rules)
            else:
                shutil.copy(target, dest_path)
        elif kind is EntryKind.DIRECTORY:
            _copy_tree(src_path, dest_path, root, ancestors | {_real(src_path)}, rules)
        else:
            shutil.copy(src_path, dest_path)
