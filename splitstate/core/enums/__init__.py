"""Core enums package.

Exports all core-level enums for convenient importing.

Usage:
    from splitstate.core.enums import ErrorCode, Environment
"""

from splitstate.core.enums.environment import Environment
from splitstate.core.enums.error_code import ErrorCode
from splitstate.core.enums.storage import ProjectionDelivery, StorageBackend

__all__ = ["ErrorCode", "Environment", "ProjectionDelivery", "StorageBackend"]
