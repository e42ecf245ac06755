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
Synchronization of source branches and staging of build-context sources.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from ..MODELS.build_config import BuildConfig
from ..MODELS.image_definition import ImageDefinition
from ..RUNNERS.command_runner import CommandRunner
from ..UTILS.template_store import TemplateStore

logger = logging.getLogger(__name__)

# Version-control metadata would change the build-cache fingerprint of COPY
IGNORED_ENTRIES = ('.git',)


class SourceManager:
    """
    Keeps one git checkout per branch under the cache root and copies it
    into each image's build context.
    """
    def __init__(self,
                 config: BuildConfig,
                 runner: Optional[CommandRunner] = None,
                 store: Optional[TemplateStore] = None):
        """
        Initializes the source manager.

        :param config: The run configuration; ``git_repository`` and
            ``cache_root`` must be set.
        :param runner: Executes git commands.
        :param store: Access to the patch-sets under the templates directory.
        """
        self.config = config
        self.runner = runner or CommandRunner()
        self.store = store or TemplateStore(config.template_root)

    def cache_dir(self, branch: str) -> Path:
        return Path(self.config.cache_root) / branch

    def sync(self, branch: str) -> Path:
        """
        Brings the cached checkout of a branch up to date, cloning it on first use.

        :param branch: The branch or ref to synchronize.
        :return: The checkout directory.
        """
        checkout = self.cache_dir(branch)
        if (checkout / ".git").is_dir():
            logger.info("Updating cached checkout of %s", branch)
            self.runner.run(["git", "fetch", "--depth", "1", "origin", branch], cwd=str(checkout))
            self.runner.run(["git", "reset", "--hard", "FETCH_HEAD"], cwd=str(checkout))
            self.runner.run(["git", "clean", "-ffdx"], cwd=str(checkout))
        else:
            logger.info("Cloning %s into %s", branch, checkout)
            if checkout.exists():
                shutil.rmtree(checkout)
            checkout.parent.mkdir(parents=True, exist_ok=True)
            self.runner.run([
                "git", "clone",
                "--branch", branch,
                "--depth", "1",
                self.config.git_repository,
                str(checkout),
            ])
        return checkout

    def stage(self, image: ImageDefinition, checkout: Path) -> Path:
        """
        Replaces ``<directory>/source`` with a clean copy of a checkout.

        :param image: The image being prepared.
        :param checkout: The synchronized checkout to copy from.
        :return: The staged source directory.
        """
        patches = self.store.list_files(image.patches) if image.patches else []
        destination = self.config.path_for(image.directory) / "source"
        if destination.exists():
            shutil.rmtree(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(checkout, destination, symlinks=True,
                        ignore=shutil.ignore_patterns(*IGNORED_ENTRIES))

        if image.patches:
            patches_dir = destination / "patches"
            patches_dir.mkdir(exist_ok=True)
            for patch in patches:
                shutil.copy2(patch, os.path.join(patches_dir, patch.name))
        logger.info("Staged %s sources into %s", image.branch, destination)
        return destination

    def prepare(self, image: ImageDefinition) -> Path:
        checkout = self.sync(image.branch)
        return self.stage(image, checkout)
