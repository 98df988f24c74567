"""Services Layer — orchestration between gateways and the pure core.

Invariants:
    - Services receive gateways as parameters (no globals, no DB imports)
"""
