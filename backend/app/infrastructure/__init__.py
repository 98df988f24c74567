"""Infrastructure Layer — database sessions, store implementations, logging.

Invariants:
    - Infrastructure implements the Protocols in core/repository_protocols.py
    - All SQLAlchemy failures mapped to DatabaseError at the session boundary

Design Decisions:
    - Store classes take the request-scoped AsyncSession in their constructor
      (explicit dependency injection, no container)
"""
