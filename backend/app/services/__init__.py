"""Service Layer — database-backed operations called by the gate and routes.

Invariants:
    - Services take an AsyncSession; they never open engines themselves
    - Failures raised as typed DigitalIdError subclasses
"""
