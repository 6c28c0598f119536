"""Task Ranking Application Package: per-owner tasks with manual ordering.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
