"""Shared test fixtures for sigtrack tests."""

import os
import shutil
import stat
import subprocess
import sys
import textwrap

import pytest

from sigtrack.snapshot.models import Snapshot

GIT = shutil.which("git")

requires_git = pytest.mark.skipif(GIT is None, reason="git executable not available")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's ~/.sigtrack.toml and SIGTRACK_* variables out of tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("SIGTRACK_"):
            monkeypatch.delenv(key)


@pytest.fixture
def make_snapshot():
    """Factory for snapshots with sensible non-zero counts."""

    def _make(**kwargs):
        defaults = dict(
            timestamp=1_700_000_000,
            version_static="0.5.11000",
            version_runtime="0.5.11000",
            duration=3,
            files=10,
            rbi_files=2,
            modules=4,
            classes=8,
            singleton_classes=3,
            methods_with_sig=30,
            methods_without_sig=10,
            calls_typed=75,
            calls_untyped=25,
            sigils={"false": 4, "true": 5, "strict": 1},
        )
        defaults.update(kwargs)
        return Snapshot(**defaults)

    return _make


@pytest.fixture
def sorbet_project(tmp_path):
    """Minimal Sorbet project layout: config, one Ruby file, one RBI."""
    root = tmp_path / "project"
    (root / "sorbet" / "rbi").mkdir(parents=True)
    (root / "sorbet" / "config").write_text("--dir\n.\n--ignore=/vendor/\n")
    (root / "lib").mkdir()
    (root / "lib" / "foo.rb").write_text("# typed: true\nclass Foo; end\n")
    (root / "sorbet" / "rbi" / "gems.rbi").write_text("# typed: false\n")
    (root / "Gemfile.lock").write_text(
        "GEM\n"
        "  remote: https://rubygems.org/\n"
        "  specs:\n"
        "    sorbet (0.5.11000)\n"
        "    sorbet-runtime (0.5.10999)\n"
        "    sorbet-static (0.5.11000-x86_64-linux)\n"
    )
    return root


def git(path, *args, date=None):
    """Run git in ``path`` with a fixed identity (and optional commit date)."""
    env = dict(os.environ)
    env.update(
        GIT_AUTHOR_NAME="Test",
        GIT_AUTHOR_EMAIL="test@example.com",
        GIT_COMMITTER_NAME="Test",
        GIT_COMMITTER_EMAIL="test@example.com",
        GIT_CONFIG_NOSYSTEM="1",
    )
    if date is not None:
        env["GIT_AUTHOR_DATE"] = f"@{date} +0000"
        env["GIT_COMMITTER_DATE"] = f"@{date} +0000"
    return subprocess.run(
        ["git", "-C", str(path), *args],
        env=env,
        capture_output=True,
        text=True,
        check=True,
    ).stdout.strip()


def commit_file(repo, relative, content, date):
    """Write ``relative`` and commit it at ``date``; return the new sha."""
    target = repo / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    git(repo, "add", relative)
    git(repo, "commit", "-q", "-m", f"update {relative}", date=date)
    return git(repo, "rev-parse", "HEAD")


@pytest.fixture
def git_repo(tmp_path):
    """Empty git repository on branch ``main``."""
    if GIT is None:
        pytest.skip("git executable not available")
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    git(repo, "config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def fake_tool(tmp_path):
    """Factory for executable Python scripts standing in for external tools."""

    def _make(name, body):
        script = tmp_path / "bin" / name
        script.parent.mkdir(exist_ok=True)
        script.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make
