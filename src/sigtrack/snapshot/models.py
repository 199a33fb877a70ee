"""Data models for coverage snapshots -- immutable records of one type checker run."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..exceptions import MalformedSnapshotRecord

# Strictness names as found in the Sorbet metrics file, weakest first
STRICTNESSES = ("ignore", "false", "true", "strict", "strong", "stdlib")

# Sigils that count as "typed" in coverage summaries
TYPED_STRICTNESSES = ("true", "strict", "strong")

_COUNT_FIELDS = (
    "duration",
    "files",
    "rbi_files",
    "modules",
    "classes",
    "singleton_classes",
    "methods_with_sig",
    "methods_without_sig",
    "calls_typed",
    "calls_untyped",
)


def _now() -> int:
    return int(time.time())


def percentage(value: Optional[int], total: Optional[int]) -> Optional[int]:
    """Return ``value`` as a rounded percentage of ``total``.

    ``None`` when either operand is missing or the total is zero, so callers
    can print "nothing" instead of guarding against a division by zero.

    >>> percentage(1, 4)
    25
    >>> percentage(3, 0) is None
    True
    """
    if value is None or total is None or total == 0:
        return None
    return round(value * 100 / total)


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time type coverage measurement.

    Built either fresh from a type checker run or from a persisted record.
    Further measurement means building a new Snapshot; provenance is added
    with ``dataclasses.replace``.
    """

    # ── Metadata ──────────────────────────────────────────────────
    timestamp: int = field(default_factory=_now)  # UTC seconds
    version_static: Optional[str] = None
    version_runtime: Optional[str] = None
    duration: int = 0  # seconds

    # ── Provenance (set during timeline replay) ───────────────────
    commit_sha: Optional[str] = None
    commit_timestamp: Optional[int] = None

    # ── Content ───────────────────────────────────────────────────
    files: int = 0
    rbi_files: int = 0
    modules: int = 0
    classes: int = 0
    singleton_classes: int = 0

    # ── Signatures and calls ──────────────────────────────────────
    methods_with_sig: int = 0
    methods_without_sig: int = 0
    calls_typed: int = 0
    calls_untyped: int = 0

    # ── Strictness sigils ─────────────────────────────────────────
    sigils: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        for name in _COUNT_FIELDS:
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.commit_timestamp is not None and self.commit_timestamp < 0:
            raise ValueError("commit_timestamp must be non-negative")

        sigils = {}
        for strictness in STRICTNESSES:
            if strictness not in self.sigils:
                continue
            count = self.sigils[strictness]
            if count < 0:
                raise ValueError(f"sigil count for {strictness!r} must be non-negative")
            sigils[strictness] = count
        object.__setattr__(self, "sigils", MappingProxyType(sigils))

    # ── Derived values ────────────────────────────────────────────

    def sigil(self, strictness: str) -> int:
        """Number of files at ``strictness``, 0 when none were reported."""
        return self.sigils.get(strictness, 0)

    @property
    def methods(self) -> int:
        return self.methods_with_sig + self.methods_without_sig

    @property
    def calls(self) -> int:
        return self.calls_typed + self.calls_untyped

    @property
    def typed_files(self) -> int:
        return sum(self.sigil(s) for s in TYPED_STRICTNESSES)

    # ── Serialization ─────────────────────────────────────────────

    def to_record(self) -> Dict[str, Any]:
        """Plain-dict form with every field present, in declaration order."""
        record: Dict[str, Any] = {}
        for f in fields(self):
            record[f.name] = getattr(self, f.name)
        record["sigils"] = {s: self.sigils[s] for s in STRICTNESSES if s in self.sigils}
        return record

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_record(), indent=indent)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Snapshot":
        """Rebuild a Snapshot from a persisted record.

        Absent keys take their defaults (``timestamp`` defaults to 0 here,
        since a persisted record always carries the real one). Unknown sigil
        names are dropped.

        Raises:
            MalformedSnapshotRecord: If a value has the wrong shape.
        """
        if not isinstance(record, Mapping):
            raise MalformedSnapshotRecord(f"expected an object, got {type(record).__name__}")

        values: Dict[str, Any] = {
            "timestamp": _count(record, "timestamp"),
            "version_static": _optional_str(record, "version_static"),
            "version_runtime": _optional_str(record, "version_runtime"),
            "commit_sha": _optional_str(record, "commit_sha"),
            "commit_timestamp": _optional_count(record, "commit_timestamp"),
            "sigils": _sigils(record.get("sigils")),
        }
        for name in _COUNT_FIELDS:
            values[name] = _count(record, name)

        return cls(**values)

    @classmethod
    def from_json(cls, text: str) -> "Snapshot":
        try:
            obj = json.loads(text)
        except ValueError as e:
            raise MalformedSnapshotRecord(f"invalid JSON: {e}")
        return cls.from_record(obj)


# ── Record field coercion ────────────────────────────────────────────


def _as_count(value: Any, name: str) -> int:
    # bool is an int subclass; a flag posing as a count is a schema error
    if isinstance(value, bool):
        raise MalformedSnapshotRecord("expected an integer, got a boolean", field=name)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise MalformedSnapshotRecord(
            f"expected an integer, got {type(value).__name__}", field=name
        )
    if value < 0:
        raise MalformedSnapshotRecord(f"expected a non-negative integer, got {value}", field=name)
    return value


def _count(record: Mapping[str, Any], name: str) -> int:
    value = record.get(name)
    if value is None:
        return 0
    return _as_count(value, name)


def _optional_count(record: Mapping[str, Any], name: str) -> Optional[int]:
    value = record.get(name)
    if value is None:
        return None
    return _as_count(value, name)


def _optional_str(record: Mapping[str, Any], name: str) -> Optional[str]:
    value = record.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedSnapshotRecord(
            f"expected a string, got {type(value).__name__}", field=name
        )
    return value


def _sigils(raw: Any) -> Dict[str, int]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise MalformedSnapshotRecord(
            f"expected an object, got {type(raw).__name__}", field="sigils"
        )
    return {
        strictness: _as_count(raw[strictness], f"sigils.{strictness}")
        for strictness in STRICTNESSES
        if strictness in raw
    }
