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
Error classes raised across imgpipe.

Each failure kind has its own class so the CLI (and tests) can tell
usage problems apart from execution failures without parsing messages.
"""
from typing import Iterable, List, Sequence


class ImgpipeError(Exception):
    """Base class for all imgpipe errors."""


class ConfigurationError(ImgpipeError):
    """
    A stage was asked to run without the configuration values it needs.
    """
    def __init__(self, command: str, missing: Iterable[str]):
        self.command = command
        self.missing: List[str] = list(missing)
        super().__init__(
            f"Missing required configuration for '{command}': {', '.join(self.missing)}"
        )


class ResolutionError(ImgpipeError):
    """
    One or more requested tags did not match any catalog entry.

    :param tags: every unmatched tag, in the order it was requested.
    """
    def __init__(self, tags: Iterable[str]):
        self.tags: List[str] = list(tags)
        super().__init__(f"Unknown image tags: {', '.join(self.tags)}")


class ExternalCommandError(ImgpipeError):
    """An external process exited with a non-zero status."""
    def __init__(self, command: Sequence[str], exit_code: int):
        self.command = list(command)
        self.exit_code = exit_code
        super().__init__(
            f"Command '{' '.join(self.command)}' failed with exit code {exit_code}"
        )


class LoadError(ImgpipeError):
    """The image catalog is missing, unreadable or malformed."""


class TemplateError(ImgpipeError):
    """A template file is missing, unreadable or references an unknown placeholder."""
