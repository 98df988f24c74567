"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON bodies, except 204 and 404 which carry none

Design Decisions:
    - Thin routes delegate to gateways passed in as dependencies
"""
