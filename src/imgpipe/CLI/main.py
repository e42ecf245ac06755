"""
Command Line Interface for imgpipe.
"""
import logging
import shlex
from pathlib import Path

import click
from dotenv import load_dotenv

from ..errors import ConfigurationError, ImgpipeError
from ..GENERATORS.site_generator import generate as generate_all
from ..MANAGERS.stage_orchestrator import StageOrchestrator
from ..MODELS.build_config import BuildConfig, DEFAULT_SMOKE_TEST
from ..PARSERS.catalog_parser import CatalogParser
from ..RUNNERS.tag_resolver import TagResolver

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

tags_argument = click.argument('tags', nargs=-1)
docker_repository_option = click.option(
    '--docker-repository', envvar='DOCKER_REPOSITORY', help='Target image repository, e.g. silex/emacs'
)


@click.group()
@click.option('--source', '-s', type=click.Path(dir_okay=False, path_type=Path),
              help='Catalog file (default: images.yml in the root directory)')
@click.option('--root', '-r', type=click.Path(file_okay=False, path_type=Path), default='.',
              help='Project root holding templates/ and the generated files')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, source, root, verbose):
    """
    imgpipe - catalog-driven container image pipeline.

    Generates build contexts from the image catalog and drives the
    prepare, build, push and test stages. Every command accepts image
    tags to restrict it to; without tags the whole catalog is used.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    ctx.ensure_object(dict)
    ctx.obj['source'] = source
    ctx.obj['root'] = root.resolve()


def _config(ctx, **fields) -> BuildConfig:
    return BuildConfig(root_dir=ctx.obj['root'], source=ctx.obj['source'], **fields)


def _images(config: BuildConfig, tags):
    catalog = CatalogParser().parse(config.catalog_path)
    return TagResolver().resolve(catalog, list(tags))


def _execute(ctx, action):
    """
    Runs a command body and maps imgpipe errors to exit codes.

    Configuration errors are usage errors: the command help is shown and
    the exit code is 2. Any other failure exits with 1.
    """
    try:
        action()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(ctx.get_help(), err=True)
        ctx.exit(2)
    except ImgpipeError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def _run_stage(ctx, stage, tags, **fields):
    def action():
        config = _config(ctx, **fields)
        images = _images(config, tags)
        StageOrchestrator(config).run(stage, images)
        click.echo(f"{stage.capitalize()} finished for {len(images)} image(s).")
    _execute(ctx, action)


@cli.command()
@tags_argument
@click.option('--git-repository', envvar='GIT_REPOSITORY', help='Git remote to fetch branches from')
@click.option('--travis-cache', envvar='TRAVIS_CACHE', type=click.Path(file_okay=False, path_type=Path),
              help='Directory holding one checkout per branch')
@click.pass_context
def prepare(ctx, tags, git_repository, travis_cache):
    """Synchronize sources and stage them into the build contexts."""
    _run_stage(ctx, "prepare", tags, git_repository=git_repository, cache_root=travis_cache)


@cli.command()
@tags_argument
@docker_repository_option
@click.pass_context
def build(ctx, tags, docker_repository):
    """Build images and tag them under their aliases."""
    _run_stage(ctx, "build", tags, docker_repository=docker_repository)


@cli.command()
@tags_argument
@docker_repository_option
@click.option('--docker-username', envvar='DOCKER_USERNAME', help='Registry username')
@click.option('--docker-password', envvar='DOCKER_PASSWORD', help='Registry password or token')
@click.pass_context
def push(ctx, tags, docker_repository, docker_username, docker_password):
    """Log in to the registry and push every tag."""
    _run_stage(ctx, "push", tags,
               docker_repository=docker_repository,
               docker_username=docker_username,
               docker_password=docker_password)


@cli.command()
@tags_argument
@docker_repository_option
@click.option('--smoke-test', default=shlex.join(DEFAULT_SMOKE_TEST), show_default=True,
              help='Command run inside each image')
@click.pass_context
def test(ctx, tags, docker_repository, smoke_test):
    """Run a smoke test inside each built image."""
    _run_stage(ctx, "test", tags,
               docker_repository=docker_repository,
               smoke_test_command=shlex.split(smoke_test))


@cli.command()
@tags_argument
@click.pass_context
def generate(ctx, tags):
    """Regenerate Dockerfiles, README and CI configuration."""
    def action():
        config = _config(ctx)
        images = _images(config, tags)
        generate_all(images, config)
        click.echo(f"Generated files for {len(images)} image(s).")
    _execute(ctx, action)


@cli.command(name='list')
@tags_argument
@click.pass_context
def list_images(ctx, tags):
    """List catalog images with their Dockerfile and branch."""
    def action():
        for image in _images(_config(ctx), tags):
            click.echo(f"{image.canonical_tag}\t{image.dockerfile_path}\t{image.branch}")
    _execute(ctx, action)


def main():
    """
    Main entry point for the CLI.
    """
    load_dotenv()
    cli(obj={})


if __name__ == '__main__':
    main()
