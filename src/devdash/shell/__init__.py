"""Shell execution for status polling.

Example:
    from devdash.shell import CommandRunner

    runner = CommandRunner(path_prefix=["/opt/homebrew/bin"], timeout=5)
    output = await runner.run("kubectl config current-context")
"""

from .runner import ERROR_PREFIX, CommandRunner

__all__ = [
    "CommandRunner",
    "ERROR_PREFIX",
]
