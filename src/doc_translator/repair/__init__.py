"""Repair loop for structurally damaged translations."""

from .orchestrator import DEFAULT_BATCH_RETRY_LIMIT, DEFAULT_MAX_ATTEMPTS, RepairOrchestrator

__all__ = [
    "DEFAULT_BATCH_RETRY_LIMIT",
    "DEFAULT_MAX_ATTEMPTS",
    "RepairOrchestrator",
]
