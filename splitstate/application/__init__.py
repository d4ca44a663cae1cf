"""Application layer - use cases.

Command side: commands, handlers, handler registry, dispatcher.
Projection side: projectors, projection engine, event channel, outbox relay.
Query side: view criteria and the read-only query service.
"""
