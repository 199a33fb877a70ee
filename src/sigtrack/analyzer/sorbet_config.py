"""Parse ``sorbet/config`` files.

A Sorbet config file is a list of command line arguments, one per line.
We only need to understand enough of it to re-emit the arguments with or
without RBI files and to list the files Sorbet would type check.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

DEFAULT_EXTENSIONS = (".rb", ".rbi")

# Flags whose values we track; everything else is passed through as-is
_PATH_FLAGS = ("--dir", "--file")
_IGNORE_FLAG = "--ignore"
_EXTENSION_FLAG = "--allowed-extension"


@dataclass(frozen=True)
class SorbetConfig:
    paths: tuple[str, ...] = ()
    ignore: tuple[str, ...] = ()
    allowed_extensions: tuple[str, ...] = ()
    passthrough: tuple[str, ...] = ()

    @classmethod
    def parse_file(cls, path: Path) -> "SorbetConfig":
        return cls.parse_string(Path(path).read_text(encoding="utf-8"))

    @classmethod
    def parse_string(cls, text: str) -> "SorbetConfig":
        paths: list[str] = []
        ignore: list[str] = []
        extensions: list[str] = []
        passthrough: list[str] = []

        pending = None  # flag waiting for its value on the next line
        for raw in text.splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            if line.startswith("-"):
                flag, sep, value = line.partition("=")
                if flag == _IGNORE_FLAG:
                    pending = None if sep else "ignore"
                    if sep:
                        ignore.append(value)
                elif flag == _EXTENSION_FLAG:
                    pending = None if sep else "extension"
                    if sep:
                        extensions.append(value)
                elif flag in _PATH_FLAGS:
                    pending = None if sep else "path"
                    if sep:
                        paths.append(value)
                elif line.startswith("--") and not sep:
                    pending = "passthrough"
                    passthrough.append(line)
                else:
                    pending = None
                    passthrough.append(line)
                continue

            if pending == "ignore":
                ignore.append(line)
            elif pending == "extension":
                extensions.append(line)
            elif pending == "passthrough":
                passthrough.append(line)
            else:
                paths.append(line)
            pending = None

        return cls(
            paths=tuple(paths),
            ignore=tuple(ignore),
            allowed_extensions=tuple(extensions),
            passthrough=tuple(passthrough),
        )

    @property
    def extensions(self) -> tuple[str, ...]:
        return self.allowed_extensions or DEFAULT_EXTENSIONS

    def without_rbi(self) -> "SorbetConfig":
        """Copy of this config that never feeds ``.rbi`` files to Sorbet."""
        return replace(
            self,
            allowed_extensions=tuple(e for e in self.extensions if e != ".rbi"),
        )

    def options(self) -> list[str]:
        """Render back to Sorbet arguments (to use with ``--no-config``)."""
        args = list(self.paths or (".",))
        args.extend(f"--ignore={pattern}" for pattern in self.ignore)
        args.extend(f"--allowed-extension={ext}" for ext in self.allowed_extensions)
        args.extend(self.passthrough)
        return args

    def is_ignored(self, relative: str) -> bool:
        """Sorbet ``--ignore`` semantics on a root-relative POSIX path.

        A pattern starting with ``/`` is anchored at the root; any other
        pattern matches a run of whole path components anywhere.
        """
        parts = relative.strip("/").split("/")
        for pattern in self.ignore:
            wanted = [p for p in pattern.strip("/").split("/") if p]
            if not wanted:
                continue
            if pattern.startswith("/"):
                if parts[: len(wanted)] == wanted:
                    return True
                continue
            for start in range(len(parts) - len(wanted) + 1):
                if parts[start : start + len(wanted)] == wanted:
                    return True
        return False

    def list_files(self, root: Path) -> list[str]:
        """Root-relative paths of every file Sorbet would read, sorted."""
        root = Path(root)
        found: set[str] = set()
        for base in self.paths or (".",):
            start = (root / base).resolve()
            if start.is_file():
                candidates = [start]
            elif start.is_dir():
                candidates = [p for p in start.rglob("*") if p.is_file()]
            else:
                continue
            for candidate in candidates:
                if not candidate.name.endswith(self.extensions):
                    continue
                try:
                    relative = candidate.relative_to(root.resolve()).as_posix()
                except ValueError:
                    continue
                if not self.is_ignored(relative):
                    found.add(relative)
        return sorted(found)

