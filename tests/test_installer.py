# tests/test_installer.py
from __future__ import annotations
import itertools
import subprocess
import pytest
from unittest.mock import MagicMock, patch

from fastturbo.installer import DependencyInstaller, InstallResult, install_dependencies
from fastturbo.models import PackageManager


@pytest.fixture(autouse=True)
def no_path_lookup():
    """Keep command assertions independent of what is installed locally."""
    with patch("fastturbo.installer.shutil.which", return_value=None) as which:
        yield which


@pytest.fixture
def fake_process():
    process = MagicMock()
    process.pid = 4242
    process.wait.return_value = 0
    return process


class TestDependencyInstaller:
    """Test best-effort background installation."""

    def test_spawns_install_command_in_project(self, tmp_path, fake_process):
        with patch("fastturbo.installer.subprocess.Popen", return_value=fake_process) as popen:
            result = DependencyInstaller(target_dir=tmp_path, package_manager=PackageManager.PNPM).run()

        args, kwargs = popen.call_args
        assert args[0] == ["pnpm", "install"]
        assert kwargs["cwd"] == tmp_path
        assert result.succeeded
        assert result.returncode == 0

    def test_yarn_runs_bare(self, tmp_path, fake_process):
        with patch("fastturbo.installer.subprocess.Popen", return_value=fake_process) as popen:
            install_dependencies(tmp_path, PackageManager.YARN)

        assert popen.call_args[0][0] == ["yarn"]

    def test_executable_resolved_on_path(self, tmp_path, fake_process, no_path_lookup):
        no_path_lookup.return_value = r"C:\Users\dev\AppData\Roaming\npm\pnpm.CMD"
        with patch("fastturbo.installer.subprocess.Popen", return_value=fake_process) as popen:
            result = install_dependencies(tmp_path, PackageManager.PNPM)

        no_path_lookup.assert_called_once_with("pnpm")
        assert popen.call_args[0][0] == [r"C:\Users\dev\AppData\Roaming\npm\pnpm.CMD", "install"]
        assert result.command == ["pnpm", "install"]

    def test_nonzero_exit_is_not_raised(self, tmp_path, fake_process):
        fake_process.wait.return_value = 1
        with patch("fastturbo.installer.subprocess.Popen", return_value=fake_process):
            result = install_dependencies(tmp_path, PackageManager.NPM)

        assert result.returncode == 1
        assert not result.succeeded

    def test_spawn_error_is_swallowed(self, tmp_path):
        with patch("fastturbo.installer.subprocess.Popen", side_effect=FileNotFoundError("pnpm")):
            result = install_dependencies(tmp_path, PackageManager.PNPM)

        assert result.error is not None
        assert "Could not start pnpm install" in result.error
        assert not result.succeeded

    def test_killed_after_timeout(self, tmp_path, fake_process):
        fake_process.wait.side_effect = [subprocess.TimeoutExpired(["pnpm", "install"], 0.1), -9]
        with patch("fastturbo.installer.subprocess.Popen", return_value=fake_process):
            result = install_dependencies(tmp_path, PackageManager.PNPM, timeout=0.1)

        fake_process.kill.assert_called_once()
        assert result.timed_out
        assert not result.succeeded

    def test_wait_uses_remaining_time(self, tmp_path, fake_process):
        with patch("fastturbo.installer.subprocess.Popen", return_value=fake_process):
            clock = itertools.chain([100.0], itertools.repeat(103.0))
            with patch("fastturbo.installer.time.monotonic", side_effect=clock):
                installer = DependencyInstaller(target_dir=tmp_path, timeout=5.0)
                installer.start()
                installer.finish()

        assert fake_process.wait.call_args.kwargs["timeout"] == pytest.approx(2.0)

    def test_finish_is_cached(self, tmp_path, fake_process):
        with patch("fastturbo.installer.subprocess.Popen", return_value=fake_process):
            installer = DependencyInstaller(target_dir=tmp_path)
            installer.start()
            first = installer.finish()
            second = installer.finish()

        assert first is second
        assert fake_process.wait.call_count == 1

    def test_timeout_must_be_positive(self, tmp_path):
        with pytest.raises(ValueError):
            DependencyInstaller(target_dir=tmp_path, timeout=0)


def test_install_result_defaults():
    result = InstallResult(command=["pnpm", "install"])
    assert result.returncode is None
    assert not result.timed_out
    assert not result.succeeded
