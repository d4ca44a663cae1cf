"""Runtime environment.

Only log rendering depends on it: development gets the console renderer,
every other environment gets JSON lines.
"""

from enum import Enum


class Environment(str, Enum):
    """Where the process runs."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
