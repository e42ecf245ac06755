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
Loading and rendering of the on-disk template files.
"""
import os
import re
from pathlib import Path
from typing import List

from jinja2 import Environment, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError

from ..errors import TemplateError

PLACEHOLDER = re.compile(r"\{\{\s*([A-Z][A-Z0-9_]*)\s*\}\}")

# Only upper-case placeholders are template syntax; the rest of the file
# (shell ${#x}, docker --format {{.Id}}) is literal text.
ENVIRONMENT = Environment(
    variable_start_string="\x00{",
    variable_end_string="}\x00",
    block_start_string="\x00%",
    block_end_string="%\x00",
    comment_start_string="\x00#",
    comment_end_string="#\x00",
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


class TemplateStore:
    """
    Access to the ``templates`` directory.

    Templates are plain text with upper-case ``{{NAME}}`` placeholders, rendered with
    jinja2. Every placeholder a template uses must be supplied.
    """
    def __init__(self, root: str):
        """
        Initializes the template store.

        :param root: The templates directory.
        """
        self.root = Path(root)

    def path(self, name: str) -> Path:
        return self.root / name

    def read(self, name: str) -> str:
        """
        Reads a template file.

        :param name: Path of the template relative to the templates directory.
        :return: The raw template text.
        :raises TemplateError: If the file is missing or unreadable.
        """
        path = self.path(name)
        if not path.is_file():
            raise TemplateError(f"Template not found: {path}")
        try:
            return path.read_text()
        except OSError as e:
            raise TemplateError(f"Cannot read template {path}: {e}") from e

    def render(self, name: str, **values: str) -> str:
        """
        Reads and renders a template file.

        :param name: Path of the template relative to the templates directory.
        :param values: Placeholder values.
        :return: The rendered text.
        :raises TemplateError: If the template cannot be read or rendered.
        """
        text = self.read(name)
        try:
            template = ENVIRONMENT.from_string(PLACEHOLDER.sub("\x00{\\1}\x00", text))
            return template.render(**values)
        except JinjaTemplateError as e:
            raise TemplateError(f"Cannot render template {self.path(name)}: {e}") from e

    def list_files(self, name: str) -> List[Path]:
        """
        Lists the regular files of a template subdirectory (e.g. a patch-set).

        :param name: Directory relative to the templates directory.
        :return: Files sorted by name.
        :raises TemplateError: If the directory does not exist.
        """
        directory = self.path(name)
        if not directory.is_dir():
            raise TemplateError(f"Template directory not found: {directory}")
        files = [directory / entry for entry in os.listdir(directory)]
        return sorted((f for f in files if f.is_file()), key=lambda p: p.name)
