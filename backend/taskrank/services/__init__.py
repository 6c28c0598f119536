"""Service Layer: orchestrates repositories around the pure core.

Invariants:
    - Services own transaction boundaries, routes never commit
"""
