"""Shell command execution for the pollers.

``CommandRunner.run`` never raises for a failing command: stdout and stderr
come back merged as text, and spawn failures or timeouts come back as a
string starting with ``"Error: "``. Classifying that text is the parsers' job.
"""

import asyncio
import os
import shutil
import signal
from contextlib import suppress
from typing import Optional, Sequence

from ..util.log import Log

log = Log.create({"service": "shell"})

ERROR_PREFIX = "Error: "
DEFAULT_TIMEOUT = 10.0
DRAIN_TIMEOUT = 1.0
SHELL_CANDIDATES = ("/bin/zsh", "/bin/bash", "/bin/sh")


def _get_shell() -> str:
    for shell in SHELL_CANDIDATES:
        if os.path.exists(shell):
            return shell
    return shutil.which("sh") or "/bin/sh"


class CommandRunner:
    """Runs shell command strings with an augmented PATH."""

    def __init__(
        self,
        *,
        path_prefix: Sequence[str] = (),
        timeout: float = DEFAULT_TIMEOUT,
        shell: Optional[str] = None,
    ) -> None:
        self.path_prefix = list(path_prefix)
        self.timeout = timeout
        self.shell = shell or _get_shell()

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        parts = [*self.path_prefix]
        if env.get("PATH"):
            parts.append(env["PATH"])
        env["PATH"] = os.pathsep.join(parts)
        return env

    async def run(self, command: str, timeout: Optional[float] = None) -> str:
        """Run ``command`` and return its merged output."""
        timeout_sec = timeout if timeout is not None else self.timeout
        log.debug("executing command", {"command": command})

        try:
            proc = await asyncio.create_subprocess_exec(
                self.shell, "-c", command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=self._env(),
                start_new_session=True,
            )
        except OSError as e:
            log.warn("command spawn failed", {"command": command, "error": str(e)})
            return f"{ERROR_PREFIX}{e}"

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout_sec)
        except asyncio.TimeoutError:
            await _terminate(proc)
            log.warn("command timed out", {"command": command, "timeout": timeout_sec})
            return f"{ERROR_PREFIX}command timed out after {timeout_sec:g}s"
        except asyncio.CancelledError:
            _kill_group(proc)
            raise

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        if proc.returncode:
            log.debug("command exited non-zero", {"command": command, "exit": proc.returncode})
        return output


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    """Kill the shell and every pipeline stage it started, even after the shell exited."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except OSError:
        with suppress(ProcessLookupError):
            proc.kill()


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    _kill_group(proc)
    # a stage that escaped the group can still hold the pipe open
    with suppress(asyncio.TimeoutError):
        await asyncio.wait_for(proc.communicate(), timeout=DRAIN_TIMEOUT)
