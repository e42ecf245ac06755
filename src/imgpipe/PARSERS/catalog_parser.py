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
Parsers for the YAML image catalog.
"""
import logging
import os
from typing import Any, List

import yaml
from pydantic import ValidationError

from ..errors import LoadError
from ..MODELS.image_definition import ImageDefinition

logger = logging.getLogger(__name__)


class CatalogParser:
    """
    Parser for the image catalog file.

    The catalog is a YAML list of image entries. A mapping with a single
    ``images`` key holding that list is accepted as well.
    """
    def parse(self, catalog_path: str) -> List[ImageDefinition]:
        """
        Parses a catalog file from a path.

        :param catalog_path: Path to the catalog file.
        :return: Image definitions in declaration order.
        :raises LoadError: If the file is missing, unreadable or malformed.
        """
        catalog_path = os.fspath(catalog_path)
        if not os.path.isfile(catalog_path):
            raise LoadError(f"Catalog not found: {catalog_path}")
        try:
            with open(catalog_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise LoadError(f"Cannot read catalog {catalog_path}: {e}") from e

        images = self.parse_from_string(content)
        logger.debug("Loaded %d images from %s", len(images), catalog_path)
        return images

    def parse_from_string(self, content: str) -> List[ImageDefinition]:
        """
        Parses a catalog from a string.

        :param content: YAML content of the catalog.
        :return: Image definitions in declaration order.
        :raises LoadError: If the content is not a valid catalog.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise LoadError(f"Invalid catalog YAML: {e}") from e

        entries = self._entries(data)
        images = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise LoadError(f"Catalog entry #{index} is not a mapping")
            try:
                images.append(ImageDefinition.model_validate(entry))
            except ValidationError as e:
                raise LoadError(f"Catalog entry #{index} is invalid: {e}") from e
        return images

    def _entries(self, data: Any) -> List[Any]:
        """
        Extracts the list of entries from the loaded document.
        """
        if isinstance(data, dict) and set(data) == {'images'}:
            data = data['images']
        if not isinstance(data, list):
            raise LoadError("Catalog must be a list of image definitions")
        return data
