"""
Application services.

Exports:
  - IndexingService: Ingestion orchestrator
  - ProcessingQueue: Upload-to-ingestion hand-off
  - DocumentService: Upload, versioning, deletion and history
  - SearchService: Hybrid search and recommendations
  - HealthService: Backend reachability probes
"""

from lawsearch.application.document_service import DocumentService
from lawsearch.application.health_service import HealthService
from lawsearch.application.indexing_service import IndexingService
from lawsearch.application.processing_queue import ProcessingQueue
from lawsearch.application.search_service import SearchService

__all__ = [
    "DocumentService",
    "HealthService",
    "IndexingService",
    "ProcessingQueue",
    "SearchService",
]
