"""
Domain Gateway - MarkLogic

Interface the stages use to talk to a MarkLogic database. The stages never
build HTTP requests themselves, which keeps them testable with an in-memory
fake.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from marklogic_plugin.domain.entities.document import Document


class IMarkLogicGateway(ABC):
    """Interface for MarkLogic document operations."""

    @abstractmethod
    async def estimate(
        self, query: Optional[str] = None, directory: Optional[str] = None
    ) -> int:
        """
        Estimate how many documents match a query.

        Args:
            query: MarkLogic string query; ``None`` matches everything
            directory: Restrict matches to a database directory

        Returns:
            Number of matching documents

        Raises:
            MarkLogicGatewayError: When the search request fails
        """
        pass

    @abstractmethod
    async def search_uris(
        self,
        query: Optional[str],
        directory: Optional[str],
        start: int,
        page_length: int,
    ) -> List[str]:
        """
        Return one page of matching document URIs.

        Args:
            query: MarkLogic string query
            directory: Restrict matches to a database directory
            start: 1-based index of the first result
            page_length: Maximum number of URIs to return

        Returns:
            URIs in result order
        """
        pass

    @abstractmethod
    async def read_document(self, uri: str) -> Document:
        """Read a single document with its content and format."""
        pass

    @abstractmethod
    async def write_documents(self, documents: Sequence[Document]) -> int:
        """Insert or replace documents, returning how many were written."""
        pass

    @abstractmethod
    async def eval_xquery(self, query: str) -> str:
        """Evaluate an ad-hoc XQuery on the server and return the raw result."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the REST endpoint answers."""
        pass
