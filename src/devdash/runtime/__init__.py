"""Runtime context exports."""

from .context import DashboardContext

__all__ = ["DashboardContext"]
