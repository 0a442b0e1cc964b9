"""The single subprocess boundary of gerritpick.

Every ssh, git and repo invocation goes through run_command so tests can
substitute a fake runner with the same signature.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, List, Union

logger = logging.getLogger(__name__)

Command = Union[str, List[str]]


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    stdout: str = ""
    stderr: str = ""


Runner = Callable[[Command], CommandResult]


def run_command(command: Command) -> CommandResult:
    """Run a command synchronously and capture its output.

    A string is interpreted by the shell; a list is executed directly.
    Failing to spawn the process is reported as a failed result.
    """
    logger.debug("Running: %s", command if isinstance(command, str) else " ".join(command))
    try:
        result = subprocess.run(
            command,
            shell=isinstance(command, str),
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug("Could not start %s: %s", command, e)
        return CommandResult(ok=False, stderr=str(e))
    return CommandResult(ok=result.returncode == 0, stdout=result.stdout, stderr=result.stderr)
