"""
Models for the run-wide configuration shared by every stage and generator.
"""
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from ..errors import ConfigurationError

DEFAULT_CATALOG = "images.yml"
DEFAULT_SMOKE_TEST = ["emacs", "--version"]


class BuildConfig(BaseModel):
    """
    Immutable configuration constructed once by the front end.

    Paths for generated and staged files are resolved against ``root_dir``.
    Stage-specific values are optional here and checked with :meth:`require`
    when a stage starts.
    """
    model_config = ConfigDict(frozen=True)

    root_dir: Path = Field(default_factory=Path.cwd)
    source: Optional[Path] = None
    templates_dir: Optional[Path] = None

    # prepare
    git_repository: Optional[str] = None
    cache_root: Optional[Path] = None

    # build / push / test
    docker_repository: Optional[str] = None
    docker_username: Optional[str] = None
    docker_password: Optional[str] = Field(default=None, repr=False)
    smoke_test_command: List[str] = Field(default_factory=lambda: list(DEFAULT_SMOKE_TEST))

    readme_file: str = "README.md"
    ci_file: str = ".travis.yml"

    @property
    def catalog_path(self) -> Path:
        return self.source if self.source is not None else self.root_dir / DEFAULT_CATALOG

    @property
    def template_root(self) -> Path:
        return self.templates_dir if self.templates_dir is not None else self.root_dir / "templates"

    def path_for(self, relative: str) -> Path:
        """Resolves a catalog-relative path (e.g. an image directory) under the root."""
        return self.root_dir / relative

    def require(self, command: str, *fields: str) -> None:
        """
        Checks that every named field is set.

        :param command: Name of the command being run, used in the error message.
        :param fields: Field names that must hold a non-empty value.
        :raises ConfigurationError: listing every field that is missing.
        """
        missing = [name for name in fields if not getattr(self, name)]
        if missing:
            raise ConfigurationError(command, missing)
