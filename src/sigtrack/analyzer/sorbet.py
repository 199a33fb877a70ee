"""Run ``srb tc`` against a working tree and turn its metrics into a Snapshot."""

from __future__ import annotations

import subprocess
import tempfile
import time
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import AnalysisFailed, AnalyzerUnavailable
from ..logging_config import get_logger, log_tool_output
from ..snapshot.models import Snapshot
from .base import AnalyzerOptions
from .metrics import DEFAULT_PREFIX, gem_version_from_lockfile, read_metrics_file, snapshot_fields
from .sorbet_config import SorbetConfig

logger = get_logger(__name__)

DEFAULT_COMMAND = ("bundle", "exec", "srb", "tc")
CONFIG_FILE = "sorbet/config"


def is_sorbet_project(path: Path, config_file: str = CONFIG_FILE) -> bool:
    return (Path(path) / config_file).is_file()


class SorbetAnalyzer:
    """Collect type coverage metrics with Sorbet.

    The project's config is re-emitted after ``--no-config`` so RBI files can
    be left out of the run without touching the file on disk.
    """

    def __init__(self, config_file: str = CONFIG_FILE):
        self.config_file = config_file

    def collect(self, path: Path, options: AnalyzerOptions) -> Snapshot:
        root = Path(path).resolve()
        config_path = root / self.config_file
        if not config_path.is_file():
            raise AnalysisFailed(f"no {self.config_file} in {root}")

        config = SorbetConfig.parse_file(config_path)
        if not options.include_rbi:
            config = config.without_rbi()

        with tempfile.TemporaryDirectory(prefix="sigtrack-metrics-") as tmp:
            metrics_file = Path(tmp) / "metrics.json"
            command = self._command(options.sorbet_bin) + [
                "--no-config",
                *config.options(),
                f"--metrics-file={metrics_file}",
                f"--metrics-prefix={DEFAULT_PREFIX.rstrip('.')}",
            ]
            started = time.monotonic()
            result = self._run(command, root, options.timeout_seconds)
            duration = int(round(time.monotonic() - started))
            log_tool_output(logger, "srb tc", result.stderr)

            # srb tc exits non-zero when it finds type errors; the metrics
            # file is still written in that case
            if not metrics_file.exists():
                if result.returncode != 0:
                    reason = f"type checker exited with code {result.returncode}"
                else:
                    reason = "type checker wrote no metrics file"
                raise AnalysisFailed(
                    reason,
                    stdout=result.stdout,
                    stderr=result.stderr,
                    returncode=result.returncode,
                )

            try:
                metrics = read_metrics_file(metrics_file)
            except (OSError, ValueError) as e:
                raise AnalysisFailed(
                    f"unreadable metrics file: {e}",
                    stdout=result.stdout,
                    stderr=result.stderr,
                    returncode=result.returncode,
                )

        rbi_files = sum(1 for f in config.list_files(root) if f.endswith(".rbi"))

        return Snapshot(
            duration=duration,
            rbi_files=rbi_files,
            version_static=gem_version_from_lockfile(root, "sorbet-static"),
            version_runtime=gem_version_from_lockfile(root, "sorbet-runtime"),
            **snapshot_fields(metrics),
        )

    def _command(self, sorbet_bin: Optional[str]) -> list[str]:
        if sorbet_bin:
            return [sorbet_bin]
        return list(DEFAULT_COMMAND)

    def _run(self, command: Sequence[str], cwd: Path, timeout: int) -> subprocess.CompletedProcess:
        logger.debug("Running %s in %s", " ".join(command), cwd)
        try:
            return subprocess.run(
                list(command),
                cwd=str(cwd),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise AnalyzerUnavailable(command[0], reason=str(e))
        except subprocess.TimeoutExpired as e:
            raise AnalysisFailed(
                f"type checker timed out after {timeout}s",
                stdout=_decode(e.stdout),
                stderr=_decode(e.stderr),
            )


def _decode(output) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
