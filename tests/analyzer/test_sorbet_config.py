"""Tests for sorbet/config parsing."""

from sigtrack.analyzer import SorbetConfig


class TestParse:
    def test_bare_lines_are_paths(self):
        config = SorbetConfig.parse_string(".\nlib\n")
        assert config.paths == (".", "lib")

    def test_dir_flag_with_value_on_next_line(self):
        config = SorbetConfig.parse_string("--dir\nlib\n--dir=app\n")
        assert config.paths == ("lib", "app")

    def test_ignore_and_extensions(self):
        config = SorbetConfig.parse_string(
            ".\n--ignore=/vendor/\n--ignore\ntmp/\n--allowed-extension=.rb\n--allowed-extension\n.rake\n"
        )
        assert config.ignore == ("/vendor/", "tmp/")
        assert config.allowed_extensions == (".rb", ".rake")

    def test_comments_and_blank_lines_skipped(self):
        config = SorbetConfig.parse_string("# a comment\n\n  .  \n")
        assert config.paths == (".",)

    def test_unknown_flags_pass_through(self):
        config = SorbetConfig.parse_string(
            ".\n--enable-experimental-requires-ancestor\n--suppress-error-code=7003\n"
        )
        assert config.paths == (".",)
        assert config.passthrough == (
            "--enable-experimental-requires-ancestor",
            "--suppress-error-code=7003",
        )

    def test_flag_value_on_next_line_passes_through(self):
        config = SorbetConfig.parse_string("--cache-dir\n.cache\n.\n")
        assert config.passthrough == ("--cache-dir", ".cache")
        assert config.paths == (".",)


class TestOptions:
    def test_renders_back_to_arguments(self):
        config = SorbetConfig.parse_string("--dir\n.\n--ignore=vendor\n--cache-dir\n.cache\n")
        assert config.options() == [".", "--ignore=vendor", "--cache-dir", ".cache"]

    def test_defaults_to_current_directory(self):
        assert SorbetConfig().options() == ["."]

    def test_without_rbi_restricts_extensions(self):
        config = SorbetConfig.parse_string(".\n").without_rbi()
        assert config.extensions == (".rb",)
        assert "--allowed-extension=.rb" in config.options()
        assert "--allowed-extension=.rbi" not in config.options()

    def test_without_rbi_keeps_other_extensions(self):
        config = SorbetConfig(allowed_extensions=(".rb", ".rbi", ".rake")).without_rbi()
        assert config.allowed_extensions == (".rb", ".rake")


class TestFiles:
    def test_anchored_ignore(self):
        config = SorbetConfig(ignore=("/vendor/",))
        assert config.is_ignored("vendor/bundle/foo.rb")
        assert not config.is_ignored("lib/vendor/foo.rb")

    def test_unanchored_ignore_matches_components(self):
        config = SorbetConfig(ignore=("tmp",))
        assert config.is_ignored("a/tmp/foo.rb")
        assert not config.is_ignored("a/tmpfile.rb")

    def test_list_files(self, sorbet_project):
        config = SorbetConfig.parse_file(sorbet_project / "sorbet" / "config")
        (sorbet_project / "vendor").mkdir()
        (sorbet_project / "vendor" / "gem.rb").write_text("")
        (sorbet_project / "README.md").write_text("")

        assert config.list_files(sorbet_project) == ["lib/foo.rb", "sorbet/rbi/gems.rbi"]
        assert config.without_rbi().list_files(sorbet_project) == ["lib/foo.rb"]
