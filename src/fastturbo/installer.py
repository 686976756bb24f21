# src/fastturbo/installer.py
"""Best-effort dependency installation with a hard wall-clock cap."""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .exceptions import InstallationError
from .models import PackageManager

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_TIMEOUT = 5.0


class InstallResult(BaseModel):
    """What happened to a background install. Never an error for the caller."""

    command: List[str]
    returncode: Optional[int] = None
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0 and not self.timed_out and self.error is None


class DependencyInstaller(BaseModel):
    """Spawns the package manager's install command in the project directory.

    ``start`` returns immediately. ``finish`` waits for whatever is left of
    ``timeout`` seconds (counted from ``start``) and kills the process if it
    is still running. Neither raises.
    """

    target_dir: Path
    package_manager: PackageManager = PackageManager.PNPM
    timeout: float = Field(default=DEFAULT_INSTALL_TIMEOUT, gt=0)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _process: Optional[subprocess.Popen] = PrivateAttr(default=None)
    _started_at: float = PrivateAttr(default=0.0)
    _result: Optional[InstallResult] = PrivateAttr(default=None)

    @property
    def command(self) -> List[str]:
        return self.package_manager.install_command

    def resolve_command(self) -> List[str]:
        """Install command with the executable resolved on PATH.

        On Windows the package managers are `.cmd` shims that `Popen` only
        finds through their full path.
        """
        executable = shutil.which(self.command[0]) or self.command[0]
        return [executable, *self.command[1:]]

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def start(self) -> None:
        self._started_at = time.monotonic()
        try:
            self._process = subprocess.Popen(
                self.resolve_command(),
                cwd=self.target_dir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            err = InstallationError(f"Could not start {' '.join(self.command)}: {e}")
            logger.debug("%s", err)
            self._result = InstallResult(command=self.command, error=str(err))
            return
        logger.debug("Started %s (pid %s)", " ".join(self.command), self._process.pid)

    def finish(self) -> InstallResult:
        if self._result is not None:
            return self._result
        if self._process is None:
            self.start()
            if self._result is not None:
                return self._result

        remaining = max(0.0, self.timeout - (time.monotonic() - self._started_at))
        result = InstallResult(command=self.command)
        try:
            result.returncode = self._process.wait(timeout=remaining)
        except subprocess.TimeoutExpired:
            self._process.kill()
            self._process.wait()
            result.timed_out = True
            logger.debug("Killed %s after %.1fs", " ".join(self.command), self.timeout)
        else:
            if result.returncode != 0:
                logger.debug("%s exited with %s", " ".join(self.command), result.returncode)

        self._result = result
        return result

    def run(self) -> InstallResult:
        self.start()
        return self.finish()


def install_dependencies(
    target_dir: Path, package_manager: PackageManager, timeout: float = DEFAULT_INSTALL_TIMEOUT
) -> InstallResult:
    """Run the install command, killing it after ``timeout`` seconds."""
    return DependencyInstaller(target_dir=target_dir, package_manager=package_manager, timeout=timeout).run()
