"""Services Layer - registries, seat store, assignment engine, view builder.

Invariants:
    - Every service is bound to one AsyncSession for its lifetime
    - Services raise typed errors from core/errors.py, never HTTPException
"""
