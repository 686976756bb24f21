# src/fastturbo/ignore.py
"""Ignore rules applied while copying the template tree."""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Pattern, Tuple

# Build artefacts, caches, lockfiles and env files never leave the template.
DEFAULT_IGNORE_PATTERNS: Tuple[str, ...] = (
    "node_modules",
    ".git",
    ".next",
    ".turbo",
    "dist",
    "out",
    ".vercel",
    ".cache",
    ".DS_Store",
    "*.env*",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
)


@dataclass(frozen=True)
class IgnoreRule:
    """A literal name or a ``*`` pattern.

    Literal rules match when they equal the entry's base name or its path
    relative to the template root. Pattern rules are a substring regex test:
    every ``*`` becomes ``.*`` and the rest is matched literally.
    """

    pattern: str
    _regex: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.is_wildcard:
            parts = (re.escape(part) for part in self.pattern.split("*"))
            object.__setattr__(self, "_regex", re.compile(".*".join(parts)))

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.pattern

    def matches(self, name: str, relative_path: str) -> bool:
        if self._regex is not None:
            return bool(self._regex.search(name) or self._regex.search(relative_path))
        return name == self.pattern or relative_path == self.pattern


class IgnoreRules:
    """An ordered, immutable set of ignore rules."""

    def __init__(self, patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS):
        self.rules = tuple(IgnoreRule(p) for p in patterns)

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def match(self, name: str, relative_path: str) -> Optional[IgnoreRule]:
        """Return the first rule matching the entry, if any."""
        for rule in self.rules:
            if rule.matches(name, relative_path):
                return rule
        return None

    def should_ignore(self, name: str, relative_path: str) -> bool:
        return self.match(name, relative_path) is not None


DEFAULT_IGNORE_RULES = IgnoreRules()
