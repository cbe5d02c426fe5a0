"""Application coordination."""

from .orchestrator import DEFAULT_SLOT_COUNT, TriggerLauncher

__all__ = ["DEFAULT_SLOT_COUNT", "TriggerLauncher"]
