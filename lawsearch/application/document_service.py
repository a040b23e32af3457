"""
Document service orchestrator.

Coordinates document upload, versioned update, deletion and lookup.
Uploads store bytes in the blob store, create the document row and hand the
ID to the processing queue. Deletion removes the row and its chunks, then
cleans external stores best-effort.

Dependencies: lawsearch.boundary.db, lawsearch.core, lawsearch.application.processing_queue
System role: Document management orchestration
"""

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lawsearch.application.processing_queue import ProcessingQueue
from lawsearch.boundary.db.CRUD.chunk_crud import chunk_crud
from lawsearch.boundary.db.CRUD.document_crud import document_crud
from lawsearch.boundary.db.CRUD.search_weight_crud import search_weight_crud
from lawsearch.boundary.db.models.document_model import DocumentModel
from lawsearch.core.exceptions import ValidationError
from lawsearch.core.interfaces import BlobStore, KeywordIndex, VectorIndex
from lawsearch.core.version_tree import VersionTreeResolver
from lawsearch.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

INITIAL_VERSION = "1.0"
PDF_CONTENT_TYPE = "application/pdf"
MAX_TITLE_LENGTH = 255
MAX_JURISDICTION_LENGTH = 100


def next_version(version: str) -> str:
    """
    Compute the label of the version that supersedes version.

    Bumps the minor component ("1.0" -> "1.1", "2.9" -> "2.10"). Labels that
    are not two to four dot-separated integers restart at "1.0".
    """
    parts = version.strip().split(".") if version else []
    if not 2 <= len(parts) <= 4 or not all(part.isdigit() for part in parts):
        return INITIAL_VERSION
    return f"{int(parts[0])}.{int(parts[1]) + 1}"


def blob_key_for(title: str) -> str:
    """Build a unique blob key such as '<uuid>-lien-priority-act.pdf'."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")[:80] or "document"
    return f"{uuid.uuid4()}-{slug}.pdf"


def _validate_fields(title: str, jurisdiction: str) -> None:
    if not title or not title.strip():
        raise ValidationError("Document title cannot be empty", field="title")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Document title exceeds {MAX_TITLE_LENGTH} characters", field="title")
    if not jurisdiction or not jurisdiction.strip():
        raise ValidationError("Jurisdiction cannot be empty", field="jurisdiction")
    if len(jurisdiction) > MAX_JURISDICTION_LENGTH:
        raise ValidationError(
            f"Jurisdiction exceeds {MAX_JURISDICTION_LENGTH} characters", field="jurisdiction"
        )


class DocumentService:
    """
    Document service orchestrator.

    Handles document lifecycle: upload, update (new version), deletion and
    version history. Ingestion itself runs on the processing queue.
    """

    def __init__(
        self,
        db: AsyncSession,
        blob_store: BlobStore,
        vector_index: VectorIndex,
        keyword_index: KeywordIndex,
        queue: ProcessingQueue | None = None,
        version_resolver: VersionTreeResolver | None = None,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            blob_store: Raw document storage
            vector_index: Cleaned on deletion
            keyword_index: Cleaned on deletion
            queue: Processing queue; documents are not ingested when None
            version_resolver: Version lineage lookup
        """
        self.db = db
        self._blob_store = blob_store
        self._vector_index = vector_index
        self._keyword_index = keyword_index
        self._queue = queue
        self._version_resolver = version_resolver or VersionTreeResolver()

    async def upload(
        self,
        title: str,
        jurisdiction: str,
        content: bytes,
        created_by: str,
        parent_document_id: uuid.UUID | None = None,
    ) -> DocumentModel:
        """
        Store a new document and queue it for ingestion.

        Steps:
        1. Validate fields and the optional parent reference
        2. Upload bytes to the blob store
        3. Create the document row with version "1.0"
        4. Commit and enqueue for processing

        Args:
            title: Display title
            jurisdiction: Jurisdiction label
            content: Raw PDF bytes
            created_by: Uploading user
            parent_document_id: Optional existing document this one derives from

        Returns:
            DocumentModel: Created document

        Raises:
            ValidationError: Blank fields, empty content or unknown parent
        """
        _validate_fields(title, jurisdiction)
        if not content:
            raise ValidationError("Document content cannot be empty", field="content")
        if parent_document_id is not None and not await document_crud.exists(self.db, parent_document_id):
            raise ValidationError(
                f"Parent document {parent_document_id} does not exist",
                field="parent_document_id",
            )

        content_url = await self._blob_store.put(blob_key_for(title), content, PDF_CONTENT_TYPE)

        document = await document_crud.create(
            self.db,
            title=title,
            jurisdiction=jurisdiction,
            content_url=content_url,
            version=INITIAL_VERSION,
            parent_document_id=parent_document_id,
            created_by=created_by,
        )
        await self.db.commit()

        logger.info(f"{__name__}:upload - Created document {document.id} ({title!r})")
        self._enqueue(document.id)
        return document

    async def update(
        self,
        document_id: uuid.UUID,
        title: str,
        jurisdiction: str,
        updated_by: str,
        content: bytes | None = None,
    ) -> DocumentModel | None:
        """
        Create the next version of a document.

        The new row points at document_id as its parent. Without new content
        the new version reuses the existing blob.

        Returns:
            DocumentModel | None: New version, None when document_id is unknown

        Raises:
            ValidationError: Blank title or jurisdiction
        """
        existing = await document_crud.get_by_id(self.db, document_id)
        if existing is None:
            return None
        _validate_fields(title, jurisdiction)

        content_url = existing.content_url
        if content:
            content_url = await self._blob_store.put(blob_key_for(title), content, PDF_CONTENT_TYPE)

        new_document = await document_crud.create(
            self.db,
            title=title,
            jurisdiction=jurisdiction,
            content_url=content_url,
            version=next_version(existing.version),
            parent_document_id=existing.id,
            created_by=updated_by,
        )
        existing.last_modified = datetime.now(timezone.utc)
        existing.last_modified_by = updated_by
        await self.db.commit()

        logger.info(
            f"{__name__}:update - Document {document_id} superseded by {new_document.id} "
            f"(version {new_document.version})"
        )
        self._enqueue(new_document.id)
        return new_document

    async def delete(self, document_id: uuid.UUID) -> bool:
        """
        Delete a document with its chunks and index entries.

        Database rows are removed in one transaction; vector, keyword and blob
        cleanup failures are logged and ignored. The blob is kept while other
        versions still reference it.

        Returns:
            bool: True if deleted, False if the document does not exist
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            return False
        content_url = document.content_url

        await chunk_crud.delete_by_document_id(self.db, document_id)
        await search_weight_crud.delete_by_document_id(self.db, document_id)
        await document_crud.delete_by_id(self.db, document_id)
        await self.db.commit()

        await self._best_effort("vector", lambda: self._vector_index.delete_by_document(document_id), document_id)
        await self._best_effort("keyword", lambda: self._keyword_index.delete_by_document(document_id), document_id)
        if not await self._blob_shared(content_url):
            await self._best_effort("blob", lambda: self._blob_store.delete(content_url), document_id)

        logger.info(f"{__name__}:delete - Deleted document {document_id}")
        return True

    async def get(self, document_id: uuid.UUID) -> DocumentModel | None:
        return await document_crud.get_by_id(self.db, document_id)

    async def list_all(self, limit: int | None = None, offset: int = 0) -> Sequence[DocumentModel]:
        return await document_crud.get_all(self.db, limit=limit, offset=offset)

    async def list_by_jurisdiction(
        self,
        jurisdiction: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        return await document_crud.get_by_jurisdiction(self.db, jurisdiction, limit=limit, offset=offset)

    async def get_version_history(self, document_id: uuid.UUID) -> list[DocumentModel]:
        """All versions in the document's tree, newest first."""
        return await self._version_resolver.resolve(self.db, document_id)

    def _enqueue(self, document_id: uuid.UUID) -> None:
        if self._queue is None:
            logger.warning(f"{__name__}:_enqueue - No processing queue, document {document_id} not indexed")
            return
        self._queue.enqueue(document_id)

    async def _blob_shared(self, content_url: str) -> bool:
        stmt = select(DocumentModel.id).where(DocumentModel.content_url == content_url).limit(1)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def _best_effort(
        self,
        target: str,
        operation: Callable[[], Awaitable[object]],
        document_id: uuid.UUID,
    ) -> None:
        try:
            await operation()
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:delete - {target} cleanup failed",
                e,
                level=logging.WARNING,
                document_id=document_id,
                target=target,
            )
