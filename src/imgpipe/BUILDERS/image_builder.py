"""
Builders invoking the docker CLI on generated build contexts.
"""
import logging
from typing import List, Optional
from ..MODELS.build_config import BuildConfig
from ..MODELS.image_definition import ImageDefinition
from ..REGISTRY.registry_client import RegistryClient
from ..RUNNERS.command_runner import CommandRunner

logger = logging.getLogger(__name__)


class ImageBuilder:
    """
    Builds and tags the image of a catalog entry from its build context.
    """
    def __init__(self,
                 config: BuildConfig,
                 runner: Optional[CommandRunner] = None,
                 registry: Optional[RegistryClient] = None):
        """
        Initializes the ImageBuilder.

        :param config: The run configuration; ``docker_repository`` must be set.
        :param runner: Executes docker commands.
        :param registry: Client used to seed the cache with the previous image.
        """
        self.config = config
        self.runner = runner or CommandRunner()
        self.registry = registry or RegistryClient(config.docker_repository, self.runner)

    def local_images(self) -> List[str]:
        """
        Lists the images present in the local docker daemon.

        :return: ``repository:tag`` references, dangling images excluded.
        """
        result = self.runner.run(
            ["docker", "images", "--format", "{{.Repository}}:{{.Tag}}"],
            capture=True,
        )
        images = []
        for line in (result.stdout or "").splitlines():
            line = line.strip()
            if line and "<none>" not in line:
                images.append(line)
        return images

    def seed_cache(self, image: ImageDefinition) -> bool:
        """
        Pulls the previously published image so its layers can be reused.

        A failure is expected for an image that was never pushed and is
        only logged.

        :return: True if the pull succeeded.
        """
        result = self.registry.pull(image.canonical_tag, check=False)
        if not result.ok:
            logger.warning(
                "Could not pull %s (exit code %d), building without it",
                self.registry.reference(image.canonical_tag), result.exit_code,
            )
        return result.ok

    def build_command(self, image: ImageDefinition, cache_from: List[str]) -> List[str]:
        command = ["docker", "build", "--pull"]
        for ref in cache_from:
            command += ["--cache-from", ref]
        if image.target:
            command += ["--target", image.target]
        command += ["-t", self.registry.reference(image.canonical_tag), "."]
        return command

    def build(self, image: ImageDefinition) -> str:
        """
        Builds an image and tags it under all of its tags.

        :param image: The catalog entry to build.
        :return: The canonical reference of the built image.
        """
        self.seed_cache(image)
        command = self.build_command(image, self.local_images())
        self.runner.run(command, cwd=str(self.config.path_for(image.directory)))

        reference = self.registry.reference(image.canonical_tag)
        for alias in image.aliases:
            self.runner.run(["docker", "tag", reference, self.registry.reference(alias)])
        return reference
