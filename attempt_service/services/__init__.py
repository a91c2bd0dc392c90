"""
Service layer for the attempt lifecycle.
"""
from .attempt_lifecycle import AttemptLifecycleManager, validate_input
from .attempt_store import AttemptStore

__all__ = ["AttemptLifecycleManager", "AttemptStore", "validate_input"]
