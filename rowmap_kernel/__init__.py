"""
rowmap kernel - shared infrastructure for the rowmap packages.

- Structured JSON logging with request-scoped context
- Typed exception hierarchy with machine-readable codes
- SQLAlchemy engine and session helpers for the persistence collaborator
"""

__version__ = "0.1.0"
