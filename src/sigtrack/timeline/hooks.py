"""Preparation hooks run after each checkout, before the type checker."""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from ..logging_config import get_logger, log_tool_output
from ..vcs.base import Tick

logger = get_logger(__name__)

# Variables Bundler and RubyGems set for the process that launched us. Left in
# place they would pin the historical checkout to today's bundle.
_BUNDLER_VARS = ("RUBYOPT", "RUBYLIB", "GEM_HOME", "GEM_PATH")
_BUNDLER_PREFIXES = ("BUNDLE_", "BUNDLER_")


@dataclass(frozen=True)
class HookResult:
    ok: bool
    output: str = ""


class PreparationHook(Protocol):
    def prepare(self, path: Path, tick: Tick) -> HookResult: ...


def isolated_env(base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Copy of ``base`` (default: ``os.environ``) without Bundler state."""
    env = dict(os.environ if base is None else base)
    for key in list(env):
        if key in _BUNDLER_VARS or key.startswith(_BUNDLER_PREFIXES):
            del env[key]
    return env


class CommandHook:
    """Run a shell-style command (e.g. ``bundle install``) in the checkout."""

    def __init__(self, command: str, timeout_seconds: int = 900):
        self.command = command
        self.argv = shlex.split(command)
        if not self.argv:
            raise ValueError("preparation command is empty")
        self.timeout_seconds = timeout_seconds

    def prepare(self, path: Path, tick: Tick) -> HookResult:
        logger.debug("Running %r for %s", self.command, tick.sha)
        try:
            result = subprocess.run(
                self.argv,
                cwd=str(path),
                env=isolated_env(),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except (FileNotFoundError, PermissionError) as e:
            return HookResult(ok=False, output=f"{self.argv[0]}: {e}")
        except subprocess.TimeoutExpired:
            return HookResult(
                ok=False, output=f"{self.command} timed out after {self.timeout_seconds}s"
            )

        log_tool_output(logger, self.argv[0], result.stdout)
        if result.returncode != 0:
            return HookResult(ok=False, output=result.stdout or "")
        return HookResult(ok=True, output=result.stdout or "")
