"""Periodic one-way mirror of an object-storage bucket into a local directory."""

from .cycle import SyncCycle, SyncCycleResult
from .scheduler import Scheduler
from .store import ObjectDescriptor, ObjectStore

__version__ = "1.0.0"

__all__ = [
    "ObjectDescriptor",
    "ObjectStore",
    "Scheduler",
    "SyncCycle",
    "SyncCycleResult",
]
