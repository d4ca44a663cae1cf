"""Test suite for splitstate.

- unit/: Unit tests - domain, application and adapters in isolation
- integration/: SQL adapters against SQLite and end-to-end scenarios
"""
