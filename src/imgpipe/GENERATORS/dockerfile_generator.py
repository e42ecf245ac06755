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
Generation of per-image build contexts from the Dockerfile templates.
"""
import logging
import os
import shutil
from typing import List, Sequence

from ..MODELS.build_config import BuildConfig
from ..MODELS.image_definition import ImageDefinition
from ..UTILS.formatting import configure_suffix
from ..UTILS.template_store import TemplateStore

logger = logging.getLogger(__name__)


class DockerfileGenerator:
    """
    Renders ``templates/<template>/Dockerfile`` into ``<version>/<template>/``
    for every image.

    Images sharing a version and template share a build context; each one
    rewrites it in turn, so the last image in the list decides the content.
    """

    def __init__(self, config: BuildConfig, store: TemplateStore):
        """
        Initializes the Dockerfile generator.

        :param config: The run configuration.
        :param store: Access to the template files.
        """
        self.config = config
        self.store = store

    def generate(self, images: Sequence[ImageDefinition]) -> List[str]:
        """
        Recreates the build context directory of each image.

        :param images: The resolved images.
        :return: The Dockerfile paths written, in order.
        """
        written = []
        for image in images:
            self.generate_one(image)
            written.append(image.dockerfile_path)
        return written

    def render(self, image: ImageDefinition) -> str:
        return self.store.render(
            f"{image.template}/Dockerfile",
            BRANCH=image.branch,
            VERSION=image.version,
            CONFIGURE=configure_suffix(image.configure),
        )

    def generate_one(self, image: ImageDefinition):
        # Resolve every template input first so an error leaves the old directory in place
        content = self.render(image)
        patches = self.store.list_files(image.patches) if image.patches else []

        directory = self.config.path_for(image.directory)
        if os.path.exists(directory):
            shutil.rmtree(directory)
        os.makedirs(directory)

        with open(self.config.path_for(image.dockerfile_path), 'w') as f:
            f.write(content)
        logger.info("Generated %s", image.dockerfile_path)

        if image.patches:
            patches_dir = os.path.join(directory, "patches")
            os.makedirs(patches_dir)
            for patch in patches:
                shutil.copy2(patch, os.path.join(patches_dir, patch.name))
            logger.info("Copied patch-set %s into %s/patches", image.patches, image.directory)
