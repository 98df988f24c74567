"""Core Layer — pure domain logic, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Validation, password policy and token issuance are pure given their inputs

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
