"""
Entry point running every generator over the resolved images.
"""
from typing import Sequence

from ..MODELS.build_config import BuildConfig
from ..MODELS.image_definition import ImageDefinition
from ..UTILS.template_store import TemplateStore
from .ci_generator import CiMatrixGenerator
from .dockerfile_generator import DockerfileGenerator
from .readme_generator import ReadmeGenerator


def generate(images: Sequence[ImageDefinition], config: BuildConfig):
    """
    Regenerates the build contexts, the README and the CI configuration.

    Each step overwrites its outputs, so running this again on an unchanged
    catalog and templates produces the same files.

    :param images: The resolved images.
    :param config: The run configuration.
    """
    store = TemplateStore(config.template_root)
    DockerfileGenerator(config, store).generate(images)
    ReadmeGenerator(config, store).generate(images)
    CiMatrixGenerator(config, store).generate(images)
