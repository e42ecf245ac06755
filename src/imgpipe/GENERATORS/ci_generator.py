"""
Generation of the CI build matrix.
"""
import logging
from typing import Dict, List, Sequence, Tuple

from ..MODELS.build_config import BuildConfig
from ..MODELS.image_definition import ImageDefinition
from ..UTILS.template_store import TemplateStore

logger = logging.getLogger(__name__)

CI_TEMPLATE = ".travis.yml"


class CiMatrixGenerator:
    """
    Renders the CI configuration with one matrix row per (branch, template)
    group, so every image built from the same sources lands in one job.
    """
    def __init__(self, config: BuildConfig, store: TemplateStore):
        self.config = config
        self.store = store

    @staticmethod
    def group(images: Sequence[ImageDefinition]) -> List[List[ImageDefinition]]:
        """
        Groups images by branch and template.

        Groups keep the order in which they are first seen. Inside a group,
        images without a target come first; sorting is stable so the
        catalog order is otherwise kept.

        :param images: The resolved images.
        :return: The groups, each a list of images.
        """
        groups: Dict[Tuple[str, str], List[ImageDefinition]] = {}
        for image in images:
            groups.setdefault((image.branch, image.template), []).append(image)
        return [
            sorted(members, key=lambda image: image.target is not None)
            for members in groups.values()
        ]

    @staticmethod
    def row(members: Sequence[ImageDefinition]) -> str:
        tags = " ".join(image.canonical_tag for image in members)
        return f'  - TAGS="{tags}"'

    def render(self, images: Sequence[ImageDefinition]) -> str:
        matrix = "\n".join(self.row(members) for members in self.group(images))
        return self.store.render(CI_TEMPLATE, MATRIX=matrix)

    def generate(self, images: Sequence[ImageDefinition]) -> str:
        """
        Writes the CI configuration file.

        :param images: The resolved images.
        :return: Path of the written file.
        """
        content = self.render(images)
        path = self.config.path_for(self.config.ci_file)
        with open(path, 'w') as f:
            f.write(content)
        logger.info("Generated %s", self.config.ci_file)
        return str(path)
