"""
Core module for application configuration and utilities.

Note: auth modules are not imported at package level to avoid circular
imports with attempt_service.models (which imports datetime_utils from
attempt_service.core). Import them directly: from attempt_service.core.auth import ...
"""
from .config import settings

__all__ = ["settings"]
