"""Core Layer: pure domain logic for task state and ranking order.

Invariants:
    - No IO, no SQLAlchemy, no FastAPI imports
    - Storage reached only through repository_protocols
"""
