#!/usr/bin/env python3
"""Publisher adapter: wraps the hosting CLI (Vercel by default).

Each call runs the CLI once inside the directory to publish and scrapes the
first deployment URL from its combined output. Every failure mode (missing
executable, non-zero exit, timeout, no URL in the output) is reported as a
PublishError so callers handle them the same way.
"""
from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Optional, Protocol, Sequence, Tuple

import config as cfg
from path_utils import safe_project_name


class PublishError(Exception):
    """The hosting CLI could not publish a directory.

    `output` holds the full CLI output when there was any.
    """

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class EnvironmentCheckError(Exception):
    """The hosting CLI is missing or not authenticated."""


class Publisher(Protocol):
    def publish(self, source_dir: Path, name: str) -> str:
        ...


def project_name(slug: str, prefix: str = cfg.PROJECT_PREFIX) -> str:
    """Deployment project name for a prototype slug ('Sign Up' -> 'prototype-sign-up')."""
    return safe_project_name(f"{prefix or ''}{slug}")


def extract_url(output: str, pattern: str = cfg.DEPLOY_URL_PATTERN) -> Optional[str]:
    match = re.search(pattern, output or "")
    return match.group(0) if match else None


class VercelPublisher:
    """Publish directories with `vercel --prod`."""

    def __init__(
        self,
        command: str = cfg.DEPLOY_COMMAND,
        *,
        timeout: float = cfg.DEPLOY_TIMEOUT,
        url_pattern: str = cfg.DEPLOY_URL_PATTERN,
    ) -> None:
        self.command = command
        self.timeout = timeout
        self.url_pattern = url_pattern

    def _run(self, args: Sequence[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.command, *args],
            cwd=str(cwd) if cwd else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            timeout=self.timeout,
        )

    def publish(self, source_dir: Path, name: str) -> str:
        args = ["--prod", f"--name={name}", "--yes", "--no-clipboard"]
        try:
            completed = self._run(args, cwd=source_dir)
        except FileNotFoundError as exc:
            raise PublishError(f"{self.command} not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise PublishError(f"timed out after {self.timeout:g}s") from exc
        except (OSError, ValueError) as exc:
            raise PublishError(str(exc)) from exc

        output = completed.stdout or ""
        if completed.returncode != 0:
            last_line = output.strip().splitlines()[-1] if output.strip() else ""
            detail = f": {last_line}" if last_line else ""
            raise PublishError(f"{self.command} exited with {completed.returncode}{detail}", output)

        url = extract_url(output, self.url_pattern)
        if not url:
            raise PublishError(f"could not extract URL from {self.command} output", output)
        return url

    def check_environment(self) -> Tuple[str, str]:
        """Return (cli version, logged-in user) or raise EnvironmentCheckError."""
        try:
            version = self._run(["--version"])
        except (OSError, ValueError, subprocess.TimeoutExpired) as exc:
            raise EnvironmentCheckError(
                f"{self.command} CLI not found. Install it with: npm install -g {self.command}"
            ) from exc
        if version.returncode != 0:
            raise EnvironmentCheckError(f"{self.command} CLI not usable: {version.stdout.strip()}")

        try:
            whoami = self._run(["whoami"])
        except (OSError, ValueError, subprocess.TimeoutExpired) as exc:
            raise EnvironmentCheckError(f"Could not check {self.command} login: {exc}") from exc
        if whoami.returncode != 0:
            raise EnvironmentCheckError(f"Not logged in to {self.command}. Run: {self.command} login")

        user_lines = whoami.stdout.strip().splitlines()
        return version.stdout.strip(), user_lines[-1].strip() if user_lines else ""
