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
Execution of external tools (git, docker) with structured results.
"""
import logging
import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..errors import ExternalCommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a single external command."""

    command: List[str]
    exit_code: int
    stdout: Optional[str] = None
    stderr: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner:
    """
    Runs external commands synchronously, one at a time.

    Output is streamed to the terminal unless ``capture`` is requested, in
    which case it is returned on the :class:`CommandResult`.
    """

    def run(self,
            command: Sequence[str],
            cwd: Optional[str] = None,
            input: Optional[str] = None,
            capture: bool = False,
            check: bool = True) -> CommandResult:
        """
        Runs a command to completion.

        Args:
            command (Sequence[str]): Command and arguments to execute.
            cwd (Optional[str]): Directory to run the command in. Only the child
                process sees it; the caller's working directory is untouched.
            input (Optional[str]): Text written to the command's stdin.
            capture (bool): Capture stdout/stderr instead of streaming them.
            check (bool): Raise on a non-zero exit status.

        Returns:
            CommandResult: Exit code and any captured output.

        Raises:
            ExternalCommandError: If ``check`` is set and the command fails
                or its executable cannot be started.
        """
        command = [os.fspath(part) for part in command]
        if cwd:
            logger.info("Running: %s (in %s)", " ".join(command), cwd)
        else:
            logger.info("Running: %s", " ".join(command))

        try:
            completed = subprocess.run(
                command,
                cwd=os.fspath(cwd) if cwd else None,
                input=input,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
                text=True,
                # Avoid shell=True for security reasons (CWE-78)
                shell=False,
            )
        except OSError as e:
            # Missing executable: report it like a shell would (exit 127)
            logger.error("Failed to start %s: %s", command[0], e)
            if check:
                raise ExternalCommandError(command, 127) from e
            return CommandResult(command=command, exit_code=127)

        result = CommandResult(
            command=command,
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
        if check and not result.ok:
            if result.stderr:
                logger.error(result.stderr.strip())
            raise ExternalCommandError(command, result.exit_code)
        return result
