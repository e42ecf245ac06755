"""
Unit tests for the command runner and run configuration.
"""
import os
import sys
import pytest
from imgpipe.errors import ConfigurationError, ExternalCommandError
from imgpipe.MODELS.build_config import BuildConfig
from imgpipe.RUNNERS.command_runner import CommandRunner


class TestCommandRunner:
    """Tests for CommandRunner."""

    def test_captures_output(self):
        result = CommandRunner().run([sys.executable, "-c", "print('hello')"], capture=True)
        assert result.ok
        assert result.stdout.strip() == "hello"

    def test_non_zero_exit_raises(self):
        with pytest.raises(ExternalCommandError) as excinfo:
            CommandRunner().run([sys.executable, "-c", "import sys; sys.exit(3)"])
        assert excinfo.value.exit_code == 3
        assert "3" in str(excinfo.value)

    def test_unchecked_failure_returns_result(self):
        result = CommandRunner().run([sys.executable, "-c", "import sys; sys.exit(4)"], check=False)
        assert result.exit_code == 4
        assert not result.ok

    def test_cwd_does_not_leak(self, tmp_path):
        before = os.getcwd()
        result = CommandRunner().run(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=str(tmp_path), capture=True
        )
        assert os.path.realpath(result.stdout.strip()) == os.path.realpath(str(tmp_path))
        assert os.getcwd() == before

    def test_input_is_passed_on_stdin(self):
        result = CommandRunner().run(
            [sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"],
            input="secret", capture=True,
        )
        assert result.stdout.strip() == "SECRET"

    def test_missing_executable_raises(self):
        with pytest.raises(ExternalCommandError) as excinfo:
            CommandRunner().run(["definitely-not-a-real-tool-imgpipe"])
        assert excinfo.value.exit_code == 127

    def test_missing_executable_unchecked_returns_result(self):
        result = CommandRunner().run(["definitely-not-a-real-tool-imgpipe"], check=False)
        assert result.exit_code == 127
        assert not result.ok


class TestBuildConfig:
    """Tests for BuildConfig."""

    def test_defaults(self, tmp_path):
        config = BuildConfig(root_dir=tmp_path)
        assert config.catalog_path == tmp_path / "images.yml"
        assert config.template_root == tmp_path / "templates"
        assert config.smoke_test_command == ["emacs", "--version"]

    def test_source_override(self, tmp_path):
        config = BuildConfig(root_dir=tmp_path, source=tmp_path / "other.yml")
        assert config.catalog_path == tmp_path / "other.yml"

    def test_require_lists_all_missing(self, tmp_path):
        config = BuildConfig(root_dir=tmp_path, docker_repository="silex/emacs")
        with pytest.raises(ConfigurationError) as excinfo:
            config.require("push", "docker_repository", "docker_username", "docker_password")
        assert excinfo.value.missing == ["docker_username", "docker_password"]

    def test_password_hidden_from_repr(self, tmp_path):
        config = BuildConfig(root_dir=tmp_path, docker_password="s3cret")
        assert "s3cret" not in repr(config)
