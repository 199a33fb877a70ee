"""Tests for preparation hooks and tick sampling."""

import subprocess
import sys

import pytest

from sigtrack.timeline import CommandHook, isolated_env, sample_ticks
from sigtrack.vcs import Tick

DAY = 86400
TICK = Tick("abc123", 1_600_000_000)


class TestIsolatedEnv:
    def test_strips_bundler_state(self):
        env = isolated_env(
            {
                "PATH": "/usr/bin",
                "HOME": "/home/me",
                "RUBYOPT": "-rbundler/setup",
                "RUBYLIB": "/gems/lib",
                "GEM_HOME": "/gems",
                "GEM_PATH": "/gems",
                "BUNDLE_GEMFILE": "/current/Gemfile",
                "BUNDLER_VERSION": "2.4.0",
            }
        )
        assert env == {"PATH": "/usr/bin", "HOME": "/home/me"}

    def test_does_not_modify_base(self):
        base = {"BUNDLE_GEMFILE": "x"}
        isolated_env(base)
        assert base == {"BUNDLE_GEMFILE": "x"}

    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("BUNDLE_GEMFILE", "/somewhere/Gemfile")
        monkeypatch.setenv("SIGTRACK_TEST_MARKER", "1")
        env = isolated_env()
        assert "BUNDLE_GEMFILE" not in env
        assert env["SIGTRACK_TEST_MARKER"] == "1"


class TestCommandHook:
    def test_empty_command_rejected(self):
        with pytest.raises(ValueError):
            CommandHook("   ")

    def test_success(self, tmp_path):
        hook = CommandHook(f"{sys.executable} -c \"print('ready')\"")
        result = hook.prepare(tmp_path, TICK)
        assert result.ok
        assert "ready" in result.output

    def test_runs_in_checkout(self, tmp_path):
        hook = CommandHook(f"{sys.executable} -c \"open('marker', 'w').close()\"")
        assert hook.prepare(tmp_path, TICK).ok
        assert (tmp_path / "marker").exists()

    def test_non_zero_exit_fails(self, tmp_path):
        script = "import sys; print('resolving'); sys.stderr.write('conflict'); sys.exit(3)"
        hook = CommandHook(f'{sys.executable} -c "{script}"')
        result = hook.prepare(tmp_path, TICK)
        assert not result.ok
        assert "resolving" in result.output
        assert "conflict" in result.output

    def test_missing_command_fails(self, tmp_path):
        result = CommandHook("definitely-not-a-real-command-xyz").prepare(tmp_path, TICK)
        assert not result.ok
        assert "definitely-not-a-real-command-xyz" in result.output

    def test_timeout_fails(self, tmp_path, monkeypatch):
        def _hang(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", _hang)
        result = CommandHook("bundle install", timeout_seconds=5).prepare(tmp_path, TICK)
        assert not result.ok
        assert "timed out after 5s" in result.output

    def test_environment_is_isolated(self, tmp_path, monkeypatch):
        seen = {}

        def _run(cmd, **kwargs):
            seen.update(kwargs)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr=None)

        monkeypatch.setenv("BUNDLE_GEMFILE", "/current/Gemfile")
        monkeypatch.setattr(subprocess, "run", _run)
        CommandHook("bundle install").prepare(tmp_path, TICK)
        assert "BUNDLE_GEMFILE" not in seen["env"]
        assert seen["cwd"] == str(tmp_path)


class TestSampleTicks:
    TICKS = [
        Tick("a", 0),
        Tick("b", DAY // 2),
        Tick("c", DAY),
        Tick("d", 8 * DAY),
        Tick("e", 40 * DAY),
    ]

    def test_all_keeps_everything(self):
        assert sample_ticks(self.TICKS, "all") == self.TICKS

    def test_daily(self):
        assert [t.sha for t in sample_ticks(self.TICKS, "daily")] == ["a", "c", "d", "e"]

    def test_weekly(self):
        assert [t.sha for t in sample_ticks(self.TICKS, "weekly")] == ["a", "d", "e"]

    def test_monthly(self):
        assert [t.sha for t in sample_ticks(self.TICKS, "monthly")] == ["a", "e"]

    def test_empty(self):
        assert sample_ticks([], "weekly") == []

    def test_unknown_interval(self):
        with pytest.raises(ValueError):
            sample_ticks(self.TICKS, "hourly")


class TestUndecodableHookOutput:
    def test_failure_with_invalid_utf8(self, tmp_path, fake_tool):
        script = fake_tool(
            "bundle",
            """
            import sys
            sys.stdout.buffer.write(b"Fetching gem metadata \\xff\\xfe\\n")
            sys.exit(5)
            """,
        )
        result = CommandHook(f"{script} install").prepare(tmp_path, TICK)
        assert not result.ok
        assert "Fetching gem metadata \ufffd\ufffd" in result.output

    def test_success_with_invalid_utf8(self, tmp_path, fake_tool):
        script = fake_tool(
            "bundle",
            """
            import sys
            sys.stdout.buffer.write(b"Bundle complete! \\xe9\\n")
            """,
        )
        result = CommandHook(script).prepare(tmp_path, TICK)
        assert result.ok
        assert "Bundle complete!" in result.output
