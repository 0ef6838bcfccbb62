"""Restore orchestration."""

from .orchestrator import RestoreOrchestrator  # noqa: F401

__all__ = ["RestoreOrchestrator"]
