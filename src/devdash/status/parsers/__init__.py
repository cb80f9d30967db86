"""Pure parsers from raw tool output to status records.

Tool parsers return a payload or raise a classified ``ToolFailure``.
"""

from . import azure, docker, github, ipinfo, kubectl, now_playing, pulumi, system

__all__ = ["azure", "docker", "github", "ipinfo", "kubectl", "now_playing", "pulumi", "system"]
