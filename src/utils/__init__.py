"""
Utility helpers for the archive export tool.
"""

from .instance_guard import InstanceLock, InstanceLockError, acquire_output_lock
from .logging_setup import setup_logging

__all__ = [
    "setup_logging",
    "InstanceLock",
    "InstanceLockError",
    "acquire_output_lock",
]
