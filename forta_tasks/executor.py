"""Command executor: forwards a normalized task request to the forta-agent CLI."""

import shlex
import subprocess
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_CLI_COMMAND


class CommandFailedError(RuntimeError):
    def __init__(self, command: str, returncode: Optional[int] = None, reason: str = ""):
        self.command = command
        self.returncode = returncode
        if reason:
            msg = f"forta-agent {command} failed: {reason}"
        else:
            msg = f"forta-agent {command} exited with status {returncode}"
        super().__init__(msg)


def build_argv(cli_command: Sequence[str], command: str, request: Dict[str, Any]) -> List[str]:
    """Turn a request mapping into CLI options.

    True becomes a bare `--key`, False/None are dropped, anything else is `--key value`.
    """
    argv = list(cli_command) + [command]
    for key, value in request.items():
        if value is None or value is False:
            continue
        if value is True:
            argv.append(f"--{key}")
        else:
            argv.extend([f"--{key}", str(value)])
    return argv


class FortaCliExecutor:
    def __init__(self, cli_command: Optional[Sequence[str]] = None):
        self.cli_command = tuple(cli_command or shlex.split(DEFAULT_CLI_COMMAND))

    def execute(self, command: str, request: Dict[str, Any]) -> None:
        argv = build_argv(self.cli_command, command, request)
        try:
            proc = subprocess.run(argv)
        except FileNotFoundError as e:
            raise CommandFailedError(command, reason=f"{argv[0]} not found ({e})") from e
        if proc.returncode != 0:
            raise CommandFailedError(command, returncode=proc.returncode)
