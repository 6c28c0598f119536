"""Infrastructure Layer: database access, repositories and logging.

Invariants:
    - Infrastructure implements core protocols; core never imports it back
"""
