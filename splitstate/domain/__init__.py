"""Domain layer - Pure business logic.

This layer contains aggregates, value objects, protocols (ports) and domain
events. The domain layer has NO dependencies on any framework or
infrastructure - it is pure Python.

Structure:
    - entities: write-side aggregates (Order)
    - value_objects: immutable values (OrderItem)
    - events: DomainEvent envelope, typed payloads, EVENT_REGISTRY
    - protocols: WriteStore, ReadStore, DeadLetterStore, LoggerProtocol ports
    - errors: error constants and projection exceptions
"""
