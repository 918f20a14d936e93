"""Services: file reads, validation passes and persistence."""

from rowmap_ingestion.services.persistence_service import RecordPersister
from rowmap_ingestion.services.reader_service import RecordReader

__all__ = ["RecordPersister", "RecordReader"]
