"""
Generation of the README index of published images.
"""
import logging
from typing import Sequence

from ..MODELS.build_config import BuildConfig
from ..MODELS.image_definition import ImageDefinition
from ..UTILS.formatting import join_quoted
from ..UTILS.template_store import TemplateStore

logger = logging.getLogger(__name__)

README_TEMPLATE = "README.md"


class ReadmeGenerator:
    """
    Renders ``templates/README.md`` with one list entry per image linking
    its tags to its Dockerfile.
    """
    def __init__(self, config: BuildConfig, store: TemplateStore):
        self.config = config
        self.store = store

    @staticmethod
    def entry(image: ImageDefinition) -> str:
        return f"* [{join_quoted(image.tags)}]({image.dockerfile_path})"

    def render(self, images: Sequence[ImageDefinition]) -> str:
        listing = "\n".join(self.entry(image) for image in images)
        return self.store.render(README_TEMPLATE, IMAGES=listing)

    def generate(self, images: Sequence[ImageDefinition]) -> str:
        """
        Writes the README file.

        :param images: The resolved images.
        :return: Path of the written file.
        """
        content = self.render(images)
        path = self.config.path_for(self.config.readme_file)
        with open(path, 'w') as f:
            f.write(content)
        logger.info("Generated %s", self.config.readme_file)
        return str(path)
