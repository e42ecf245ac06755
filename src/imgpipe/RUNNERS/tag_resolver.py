"""
Resolution of requested image tags against the catalog.
"""
from typing import List, Optional, Sequence
from ..errors import ResolutionError
from ..MODELS.image_definition import ImageDefinition


class TagResolver:
    """
    Selects the catalog entries a run should operate on.
    """
    def resolve(self,
                catalog: Sequence[ImageDefinition],
                requested_tags: Optional[Sequence[str]] = None) -> List[ImageDefinition]:
        """
        Maps requested tags onto catalog entries.

        With no requested tags the whole catalog is returned in catalog order.
        Otherwise the result follows the order of ``requested_tags``; a tag
        matches the first entry listing it (canonical or alias), so two tags
        of the same entry yield that entry twice.

        :param catalog: The loaded catalog.
        :param requested_tags: Tags given on the command line.
        :return: The selected image definitions.
        :raises ResolutionError: listing every tag that matched no entry.
        """
        if not requested_tags:
            return list(catalog)

        resolved = []
        unmatched = []
        for tag in requested_tags:
            image = self.find(catalog, tag)
            if image is None:
                unmatched.append(tag)
            else:
                resolved.append(image)

        if unmatched:
            raise ResolutionError(unmatched)
        return resolved

    @staticmethod
    def find(catalog: Sequence[ImageDefinition], tag: str) -> Optional[ImageDefinition]:
        """
        Returns the first entry whose tags contain ``tag``, or None.
        """
        for image in catalog:
            if tag in image.tags:
                return image
        return None
