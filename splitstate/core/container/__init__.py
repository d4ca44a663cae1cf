"""Container module - centralized dependency wiring.

Usage:
    from splitstate.core.container import build_application

    app = build_application()
    await app.initialize()
    result = await app.dispatch(CreateOrder(customer_id="42", items=(...,)))
"""

from splitstate.core.container.application import Application, build_application
from splitstate.core.container.infrastructure import (
    StoreBundle,
    build_stores,
    get_logger,
)

__all__ = [
    "Application",
    "StoreBundle",
    "build_application",
    "build_stores",
    "get_logger",
]
