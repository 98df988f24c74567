"""Database Package — declarative Base and standalone session factory.

Invariants:
    - Single async engine per process for the API (initialized via init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
