"""Read Sorbet's ``--metrics-file`` output and map it onto Snapshot fields."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

from ..snapshot.models import STRICTNESSES

DEFAULT_PREFIX = "ruby_typer.unknown."

# Snapshot field -> metric name (after prefix stripping)
_DIRECT_METRICS = {
    "files": "types.input.files",
    "modules": "types.input.modules.total",
    "classes": "types.input.classes.total",
    "singleton_classes": "types.input.singleton_classes.total",
    "methods_with_sig": "types.sig.count",
    "calls_typed": "types.input.sends.typed",
}

_METHODS_TOTAL = "types.input.methods.total"
_SENDS_TOTAL = "types.input.sends.total"
_SIGIL_PREFIX = "types.input.files.sigil."


def parse_metrics(obj: Any, prefix: str = DEFAULT_PREFIX) -> Dict[str, int]:
    """Flatten ``{"metrics": [{"name": ..., "value": ...}]}`` into a dict.

    Raises:
        ValueError: If the payload doesn't have the expected shape.
    """
    if not isinstance(obj, dict) or not isinstance(obj.get("metrics"), list):
        raise ValueError("metrics payload has no 'metrics' list")

    metrics: Dict[str, int] = {}
    for entry in obj["metrics"]:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise ValueError(f"malformed metric entry: {entry!r}")
        name = entry["name"]
        if name.startswith(prefix):
            name = name[len(prefix):]
        value = entry.get("value") or 0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"metric {name} has a non-numeric value: {value!r}")
        try:
            metrics[name] = int(value)
        except (OverflowError, ValueError):
            # JSON Infinity / NaN
            raise ValueError(f"metric {name} is not finite: {value!r}") from None
    return metrics


def read_metrics_file(path: Path, prefix: str = DEFAULT_PREFIX) -> Dict[str, int]:
    with open(path, encoding="utf-8") as f:
        return parse_metrics(json.load(f), prefix=prefix)


def snapshot_fields(metrics: Dict[str, int]) -> Dict[str, Any]:
    """Snapshot constructor kwargs derived from parsed metrics."""
    values: Dict[str, Any] = {
        name: max(0, metrics.get(metric, 0)) for name, metric in _DIRECT_METRICS.items()
    }
    # Sorbet reports totals; the "without" halves are what's left over
    values["methods_without_sig"] = max(
        0, metrics.get(_METHODS_TOTAL, 0) - values["methods_with_sig"]
    )
    values["calls_untyped"] = max(0, metrics.get(_SENDS_TOTAL, 0) - values["calls_typed"])
    values["sigils"] = {
        strictness: max(0, metrics[_SIGIL_PREFIX + strictness])
        for strictness in STRICTNESSES
        if _SIGIL_PREFIX + strictness in metrics
    }
    return values


def gem_version_from_lockfile(root: Path, gem: str) -> Optional[str]:
    """Version of ``gem`` pinned in ``Gemfile.lock``, if any."""
    lockfile = Path(root) / "Gemfile.lock"
    if not lockfile.is_file():
        return None
    content = lockfile.read_text(encoding="utf-8", errors="replace")
    match = re.search(rf"^    {re.escape(gem)} \((\d+\.\d+\.\d+)", content, re.MULTILINE)
    return match.group(1) if match else None
