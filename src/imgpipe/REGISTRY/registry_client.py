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
Registry interactions through the docker CLI: pull, login and push.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from ..RUNNERS.command_runner import CommandResult, CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class RegistryAuth:
    """Authentication credentials for a registry."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"RegistryAuth(username={self.username!r}, password='***')"


class RegistryClient:
    """
    Client for pushing and pulling images of one repository.
    """

    def __init__(self, repository: str, runner: Optional[CommandRunner] = None):
        """
        Initialize the registry client.

        Args:
            repository: Image repository, e.g. 'silex/emacs'
            runner: Executes docker commands.
        """
        self.repository = repository
        self.runner = runner or CommandRunner()

    def reference(self, tag: str) -> str:
        """Full reference of a tag in this repository, e.g. 'silex/emacs:26.1'."""
        return f"{self.repository}:{tag}"

    def pull(self, tag: str, check: bool = True) -> CommandResult:
        """Pull an image tag."""
        return self.runner.run(["docker", "pull", self.reference(tag)], check=check)

    def login(self, auth: RegistryAuth) -> None:
        """
        Authenticate against the registry.

        The password is passed on stdin so it never shows up in the
        process list or in logs.
        """
        logger.info("Logging in as %s", auth.username)
        self.runner.run(
            ["docker", "login", "--username", auth.username, "--password-stdin"],
            input=auth.password,
        )

    def push(self, tag: str) -> None:
        """Push an image tag."""
        self.runner.run(["docker", "push", self.reference(tag)])
