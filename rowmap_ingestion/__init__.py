"""
rowmap_ingestion -- Schema-driven mapping of delimited text rows to typed records.

Resolves input columns to dataclass fields (by header, alias or position),
coerces cell text into typed values, validates cells into structured
issues, and writes records and error reports back out.

Architecture:
    domain/    pure types, schema descriptor, parsers, validators (ZERO I/O)
    mapping/   column resolver, coercion engine, row materializer (ZERO I/O)
    adapters/  line source, record writer, error report writer (file I/O)
    services/  reader (batch orchestrator) and persister (SQLAlchemy)
"""
