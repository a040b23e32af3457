"""
Document version lineage resolution.

Walks parent links up to the root version, then collects every descendant
of the root depth-first. Used by document history and ranking.

Dependencies: sqlalchemy, lawsearch.boundary.db
System role: Version tree queries over the document forest
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from lawsearch.boundary.db.CRUD.document_crud import document_crud
from lawsearch.boundary.db.models.document_model import DocumentModel
from lawsearch.core.exceptions import DataIntegrityError

logger = logging.getLogger(__name__)


class VersionTreeResolver:
    """Resolve the full version lineage of a document."""

    async def find_root(self, session: AsyncSession, document_id: uuid.UUID) -> DocumentModel | None:
        """
        Walk parent links to the root version.

        A parent reference to a missing document ends the walk at the
        current document.

        Returns:
            DocumentModel | None: Root version, None when document_id is unknown

        Raises:
            DataIntegrityError: When the parent chain loops
        """
        current = await document_crud.get_by_id(session, document_id)
        if current is None:
            return None

        seen = {current.id}
        while current.parent_document_id is not None:
            if current.parent_document_id in seen:
                raise DataIntegrityError(
                    f"Version cycle detected at document {current.parent_document_id}",
                    details={"document_id": str(document_id)},
                )
            parent = await document_crud.get_by_id(session, current.parent_document_id)
            if parent is None:
                logger.warning(
                    f"{__name__}:find_root - Parent {current.parent_document_id} of {current.id} missing, "
                    "treating as root"
                )
                break
            seen.add(parent.id)
            current = parent

        return current

    async def resolve(self, session: AsyncSession, document_id: uuid.UUID) -> list[DocumentModel]:
        """
        Return every version in the tree containing document_id.

        Args:
            session: Async database session
            document_id: Any version in the tree

        Returns:
            list[DocumentModel]: All versions, newest first; empty for an unknown ID

        Raises:
            DataIntegrityError: When the parent relation contains a cycle
        """
        root = await self.find_root(session, document_id)
        if root is None:
            return []

        collected: dict[uuid.UUID, DocumentModel] = {}
        stack = [root]
        while stack:
            node = stack.pop()
            if node.id in collected:
                raise DataIntegrityError(
                    f"Version cycle detected at document {node.id}",
                    details={"root_id": str(root.id)},
                )
            collected[node.id] = node
            stack.extend(await document_crud.get_children(session, node.id))

        return sorted(collected.values(), key=lambda doc: doc.created_at, reverse=True)
