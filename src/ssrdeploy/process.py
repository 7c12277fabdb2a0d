"""
Scoped execution of external shell commands (install/build steps).

The child process is always reaped: on success, on failure, and when the
awaiting task is cancelled or interrupted (the command's process group is killed first).
"""

import asyncio
import contextlib
import logging
import os
import signal
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Union

from pydantic import BaseModel

from .exceptions import CommandFailedError, CommandNotFoundError

logger = logging.getLogger(__name__)

STDERR_TAIL_LINES = 20


class CommandResult(BaseModel):
    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""


CommandRunner = Callable[..., Awaitable[CommandResult]]


def _tail(text: str, lines: int = STDERR_TAIL_LINES) -> str:
    return "\n".join(text.strip().splitlines()[-lines:])


async def run_command(
    command: str,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
    stage: Optional[str] = None,
) -> CommandResult:
    """
    Run `command` through the shell and wait for it to exit.

    Args:
        command: Shell command line
        cwd: Working directory, defaults to the current one
        env: Extra environment variables layered over os.environ
        stage: Lifecycle stage name, carried into errors

    Returns:
        CommandResult of a zero exit

    Raises:
        CommandFailedError: non-zero exit code
        CommandNotFoundError: the shell or cwd could not be used
    """
    full_env = None
    if env:
        full_env = {**os.environ, **env}

    logger.info(f"$ {command}")
    try:
        proc = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd) if cwd is not None else None,
            env=full_env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        raise CommandNotFoundError(f"Unable to start '{command}': {e}") from e

    try:
        stdout_b, stderr_b = await proc.communicate()
    except BaseException:
        if proc.returncode is None:
            logger.warning(f"Interrupted, killing '{command}' (pid {proc.pid})")
            # the shell leads its own group; kill the command with it
            with contextlib.suppress(ProcessLookupError):
                os.killpg(proc.pid, signal.SIGKILL)
            await proc.wait()
        raise

    stdout = stdout_b.decode(errors="replace")
    stderr = stderr_b.decode(errors="replace")
    if stdout.strip():
        logger.debug(f"[{command}] stdout:\n{stdout.rstrip()}")
    if stderr.strip():
        logger.debug(f"[{command}] stderr:\n{stderr.rstrip()}")

    if proc.returncode != 0:
        logger.error(f"Command '{command}' exited with code {proc.returncode}")
        raise CommandFailedError(command, proc.returncode, _tail(stderr), stage=stage)

    return CommandResult(command=command, returncode=proc.returncode, stdout=stdout, stderr=stderr)
