# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Orchestration of the pipeline stages over the resolved images.
"""
import logging
from typing import Optional, Sequence

from ..BUILDERS.image_builder import ImageBuilder
from ..MODELS.build_config import BuildConfig
from ..MODELS.image_definition import ImageDefinition
from ..REGISTRY.registry_client import RegistryAuth, RegistryClient
from ..RUNNERS.command_runner import CommandRunner
from .source_manager import SourceManager

logger = logging.getLogger(__name__)

STAGES = ("prepare", "build", "push", "test")


class StageOrchestrator:
    """
    Runs one pipeline stage over a list of images.

    Images are processed one after the other. The first failing external
    command raises and the remaining images are not attempted. Required
    configuration is checked before anything is executed.
    """
    def __init__(self, config: BuildConfig, runner: Optional[CommandRunner] = None):
        """
        Initializes the orchestrator.

        :param config: The run configuration.
        :param runner: Executes external commands; shared by every stage.
        """
        self.config = config
        self.runner = runner or CommandRunner()

    def run(self, stage: str, images: Sequence[ImageDefinition]):
        """
        Runs a stage by name.

        :param stage: One of ``prepare``, ``build``, ``push`` or ``test``.
        :param images: The resolved images.
        """
        if stage not in STAGES:
            raise ValueError(f"Unknown stage: {stage}")
        getattr(self, stage)(images)

    def _registry(self) -> RegistryClient:
        return RegistryClient(self.config.docker_repository, self.runner)

    def prepare(self, images: Sequence[ImageDefinition]):
        """
        Synchronizes each image's branch and stages it into its build context.
        """
        self.config.require("prepare", "git_repository", "cache_root")
        sources = SourceManager(self.config, self.runner)
        for image in images:
            logger.info("Preparing %s", image.canonical_tag)
            sources.prepare(image)

    def build(self, images: Sequence[ImageDefinition]):
        """
        Builds each image and tags it under its aliases.
        """
        self.config.require("build", "docker_repository")
        builder = ImageBuilder(self.config, self.runner, self._registry())
        for image in images:
            logger.info("Building %s", image.canonical_tag)
            builder.build(image)

    def push(self, images: Sequence[ImageDefinition]):
        """
        Pushes every tag of each image.
        """
        self.config.require("push", "docker_repository", "docker_username", "docker_password")
        registry = self._registry()
        auth = RegistryAuth(self.config.docker_username, self.config.docker_password)
        for image in images:
            registry.login(auth)
            for tag in image.tags:
                logger.info("Pushing %s", registry.reference(tag))
                registry.push(tag)

    def test(self, images: Sequence[ImageDefinition]):
        """
        Runs the smoke-test command in a fresh container of each image.
        """
        self.config.require("test", "docker_repository")
        registry = self._registry()
        for image in images:
            reference = registry.reference(image.canonical_tag)
            logger.info("Testing %s", reference)
            self.runner.run(["docker", "run", "--rm", reference] + list(self.config.smoke_test_command))
