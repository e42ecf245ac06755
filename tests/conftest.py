"""
Shared fixtures: a project root with templates and a recording command runner.
"""
import pytest
from imgpipe.errors import ExternalCommandError
from imgpipe.MODELS.build_config import BuildConfig
from imgpipe.RUNNERS.command_runner import CommandResult, CommandRunner

DOCKERFILE_TEMPLATE = """FROM alpine:3.9 as dev
ENV EMACS_BRANCH="{{BRANCH}}"
ENV EMACS_VERSION="{{VERSION}}"
RUN ./configure{{CONFIGURE}} && make
"""

README_TEMPLATE = "# Images\n\n{{IMAGES}}\n"
CI_TEMPLATE = "env:\n  matrix:\n{{MATRIX}}\n"


class RecordingRunner(CommandRunner):
    """
    Command runner that records commands instead of executing them.

    :param failures: maps a command prefix (tuple) to the exit code it returns.
    :param outputs: maps a command prefix (tuple) to the captured stdout.
    """
    def __init__(self, failures=None, outputs=None):
        self.failures = failures or {}
        self.outputs = outputs or {}
        self.calls = []

    def _lookup(self, table, command):
        for prefix, value in table.items():
            if tuple(command[:len(prefix)]) == tuple(prefix):
                return value
        return None

    def run(self, command, cwd=None, input=None, capture=False, check=True):
        command = [str(part) for part in command]
        self.calls.append({"command": command, "cwd": cwd, "input": input})
        exit_code = self._lookup(self.failures, command) or 0
        stdout = self._lookup(self.outputs, command) if capture else None
        if check and exit_code:
            raise ExternalCommandError(command, exit_code)
        return CommandResult(command=command, exit_code=exit_code, stdout=stdout)

    @property
    def commands(self):
        return [call["command"] for call in self.calls]


@pytest.fixture
def project(tmp_path):
    """A project root with a Dockerfile template, a patch-set and doc templates."""
    templates = tmp_path / "templates"
    (templates / "alpine" / "3.9").mkdir(parents=True)
    (templates / "alpine" / "3.9" / "Dockerfile").write_text(DOCKERFILE_TEMPLATE)
    (templates / "fix-build").mkdir()
    (templates / "fix-build" / "0001-fix.patch").write_text("--- a\n+++ b\n")
    (templates / "fix-build" / "0002-more.patch").write_text("--- c\n+++ d\n")
    (templates / "README.md").write_text(README_TEMPLATE)
    (templates / ".travis.yml").write_text(CI_TEMPLATE)
    return tmp_path


@pytest.fixture
def config(project):
    return BuildConfig(root_dir=project)


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def runner_factory():
    """Builds a RecordingRunner with scripted failures or outputs."""
    return RecordingRunner
