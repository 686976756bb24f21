# tests/conftest.py
from __future__ import annotations
import json
import os
import pytest
from pathlib import Path


def _can_symlink(tmp_path: Path) -> bool:
    probe = tmp_path / ".symlink-probe"
    try:
        probe.symlink_to(tmp_path)
    except (OSError, NotImplementedError):
        return False
    probe.unlink()
    return True


@pytest.fixture
def symlinks(tmp_path):
    """Skip the test where the platform cannot create symlinks."""
    if not _can_symlink(tmp_path):
        pytest.skip("symlinks not supported on this platform")


@pytest.fixture
def template_root(tmp_path):
    """Create a small but valid monorepo template."""
    root = tmp_path / "template"
    (root / "apps" / "web").mkdir(parents=True)
    (root / "packages" / "ui").mkdir(parents=True)

    (root / "package.json").write_text(json.dumps({"name": "template"}, indent=2))
    (root / "pnpm-workspace.yaml").write_text('packages:\n  - "apps/*"\n  - "packages/*"\n')
    (root / ".npmrc").write_text("auto-install-peers=true\n")
    (root / "apps" / "web" / "package.json").write_text('{"name": "web"}')
    (root / "packages" / "ui" / "index.ts").write_text("export {};\n")

    (root / "node_modules").mkdir()
    (root / "node_modules" / "foo.txt").write_text("dependency")

    return root


@pytest.fixture
def rich_manifest_template(template_root):
    """Template whose manifest carries extra fields in a known order."""
    manifest = {
        "name": "template",
        "private": True,
        "scripts": {"dev": "turbo run dev"},
        "packageManager": "pnpm@8.0.0",
        "workspaces": ["legacy/*"],
        "engines": {"node": ">=18"},
    }
    (template_root / "package.json").write_text(json.dumps(manifest, indent=2))
    return template_root


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty directory used as the current working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Isolate configuration to a temporary directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("FASTTURBO_CONFIG", raising=False)

    return config_dir


def _tree_listing(root: Path) -> list[str]:
    """Relative POSIX paths of everything under root, sorted."""
    entries = []
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            entries.append((Path(dirpath) / name).relative_to(root).as_posix())
    return sorted(entries)


@pytest.fixture
def tree_listing():
    """Provide the tree listing helper."""
    return _tree_listing
