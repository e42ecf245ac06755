import pytest
from click.testing import CliRunner
from imgpipe.CLI.main import cli
from imgpipe.MANAGERS import stage_orchestrator

CATALOG = """
- version: "27.1"
  template: alpine/3.9
  branch: emacs-27
  target: dev
  tags: [27.1-dev]
- version: "27.1"
  template: alpine/3.9
  branch: emacs-27
  configure: --with-modules
  tags: [27.1, "27", latest]
"""

CLEAN_ENV = {
    "DOCKER_REPOSITORY": None,
    "DOCKER_USERNAME": None,
    "DOCKER_PASSWORD": None,
    "GIT_REPOSITORY": None,
    "TRAVIS_CACHE": None,
}


@pytest.fixture
def catalog_project(project):
    (project / "images.yml").write_text(CATALOG)
    return project


@pytest.fixture
def recorded(monkeypatch, runner):
    monkeypatch.setattr(stage_orchestrator, "CommandRunner", lambda: runner)
    return runner


def invoke(project, *args, env=None):
    environment = dict(CLEAN_ENV)
    environment.update(env or {})
    return CliRunner().invoke(cli, ['--root', str(project)] + list(args), obj={}, env=environment)


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'generate' in result.output
    assert 'prepare' in result.output


def test_cli_generate(catalog_project):
    result = invoke(catalog_project, 'generate')
    assert result.exit_code == 0, result.output
    dockerfile = (catalog_project / "27.1" / "alpine" / "3.9" / "Dockerfile").read_text()
    assert "./configure --with-modules" in dockerfile
    readme = (catalog_project / "README.md").read_text()
    assert "* [`27.1`, `27`, `latest`](27.1/alpine/3.9/Dockerfile)" in readme
    ci = (catalog_project / ".travis.yml").read_text()
    assert 'TAGS="27.1 27.1-dev"' in ci


def test_cli_generate_with_source_override(project, tmp_path):
    source = tmp_path / "elsewhere.yml"
    source.write_text(CATALOG)
    result = invoke(project, '--source', str(source), 'generate', '27.1')
    assert result.exit_code == 0, result.output
    assert 'TAGS="27.1"' in (project / ".travis.yml").read_text()


def test_cli_list_follows_requested_order(catalog_project):
    result = invoke(catalog_project, 'list', 'latest', '27.1-dev')
    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if "\t" in line]
    assert lines == [
        "27.1\t27.1/alpine/3.9/Dockerfile\temacs-27",
        "27.1-dev\t27.1/alpine/3.9/Dockerfile\temacs-27",
    ]


def test_cli_unknown_tags(catalog_project):
    result = invoke(catalog_project, 'list', 'nope', 'missing')
    assert result.exit_code == 1
    assert 'Unknown image tags: nope, missing' in result.output


def test_cli_missing_catalog(project):
    result = invoke(project, 'generate')
    assert result.exit_code == 1
    assert 'Catalog not found' in result.output


def test_cli_build_requires_repository(catalog_project, recorded):
    result = invoke(catalog_project, 'build')
    assert result.exit_code == 2
    assert 'docker_repository' in result.output
    assert '--docker-repository' in result.output
    assert recorded.calls == []


def test_cli_build_reads_environment(catalog_project, recorded):
    result = invoke(catalog_project, 'build', '27.1', env={"DOCKER_REPOSITORY": "silex/emacs"})
    assert result.exit_code == 0, result.output
    assert ["docker", "tag", "silex/emacs:27.1", "silex/emacs:latest"] in recorded.commands


def test_cli_push_flags(catalog_project, recorded):
    result = invoke(catalog_project, 'push', '27.1-dev',
                    '--docker-repository', 'silex/emacs',
                    '--docker-username', 'bot',
                    '--docker-password', 's3cret')
    assert result.exit_code == 0, result.output
    assert recorded.commands[-1] == ["docker", "push", "silex/emacs:27.1-dev"]


def test_cli_test_failure_exits_non_zero(catalog_project, runner_factory, monkeypatch):
    failing = runner_factory(failures={("docker", "run"): 1})
    monkeypatch.setattr(stage_orchestrator, "CommandRunner", lambda: failing)
    result = invoke(catalog_project, 'test', '--docker-repository', 'silex/emacs',
                    '--smoke-test', 'emacs --batch --eval "(kill-emacs 0)"')
    assert result.exit_code == 1
    assert 'exit code 1' in result.output
    assert failing.commands[0][-3:] == ["--batch", "--eval", "(kill-emacs 0)"]
