"""splitstate - CQRS core with physically separated write and read stores.

Commands mutate aggregates in a write store; committed domain events are
projected into denormalized views in a separate read store; queries only ever
read those views.

Layers:
    - core: Result types, base errors, enums, configuration, composition root
    - domain: aggregates, domain events, ports (protocols)
    - application: command dispatch, projection pipeline, query service
    - infrastructure: in-memory and SQLAlchemy adapters, logging
"""

__version__ = "0.1.0"
