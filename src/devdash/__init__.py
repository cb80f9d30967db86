"""devdash - developer status dashboard.

Polls the local developer CLIs (kubectl, az, gh, pulumi, docker) and a few
system metrics, and keeps an always-current snapshot of each.
"""

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy import module components."""
    if name in ("Bus", "BusEvent", "GlobalPath"):
        from . import core
        return getattr(core, name)
    if name == "DashboardContext":
        from .runtime import DashboardContext
        return DashboardContext
    if name in ("ToolStatusAggregator", "SystemStatusAggregator", "MutationCoordinator"):
        from . import status
        return getattr(status, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "Bus",
    "BusEvent",
    "GlobalPath",
    "DashboardContext",
    "ToolStatusAggregator",
    "SystemStatusAggregator",
    "MutationCoordinator",
]
