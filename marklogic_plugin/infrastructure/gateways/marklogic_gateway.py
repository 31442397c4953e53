"""
Infrastructure Gateway - MarkLogic REST

Implements the MarkLogic gateway on top of the REST API (``/v1/search``,
``/v1/documents``, ``/v1/eval``) using httpx.
"""

from typing import Any, Dict, List, Optional, Sequence

import httpx
import structlog

from marklogic_plugin.domain.entities.document import (
    AuthenticationType,
    Document,
    DocumentFormat,
)
from marklogic_plugin.domain.entities.errors import DomainError
from marklogic_plugin.domain.gateways.marklogic_gateway import IMarkLogicGateway

logger = structlog.get_logger(__name__)

FORMAT_HEADER = "vnd.marklogic.document-format"


class MarkLogicGatewayError(DomainError):
    """Exception raised when a MarkLogic REST call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, details={"status_code": status_code})
        self.status_code = status_code


class MarkLogicGateway(IMarkLogicGateway):
    """MarkLogic gateway using an async HTTP client."""

    def __init__(
        self,
        base_url: str,
        user: str,
        password: str,
        authentication_type: AuthenticationType = AuthenticationType.DIGEST,
        database: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the gateway.

        Args:
            base_url: REST app server URL (e.g., "http://marklogic:8000")
            user: MarkLogic user
            password: MarkLogic password
            authentication_type: BASIC or DIGEST, as configured on the app server
            database: Database to target instead of the app server default
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.database = database
        self.timeout = timeout
        if authentication_type is AuthenticationType.BASIC:
            self._auth: httpx.Auth = httpx.BasicAuth(user, password)
        else:
            self._auth = httpx.DigestAuth(user, password)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, auth=self._auth)

    def _params(self, **params: Any) -> Dict[str, Any]:
        result = {key: value for key, value in params.items() if value is not None}
        if self.database:
            result["database"] = self.database
        return result

    async def _send(
        self, client: httpx.AsyncClient, method: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error(
                "marklogic.http_error",
                method=method,
                url=url,
                status_code=e.response.status_code,
                response_text=e.response.text,
            )
            raise MarkLogicGatewayError(
                f"MarkLogic HTTP error {e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error("marklogic.request_error", method=method, url=url, error=str(e))
            raise MarkLogicGatewayError(f"MarkLogic request failed: {e}") from e

    async def estimate(
        self, query: Optional[str] = None, directory: Optional[str] = None
    ) -> int:
        params = self._params(
            q=query, directory=_as_directory(directory), pageLength=1, format="json"
        )
        async with self._client() as client:
            response = await self._send(client, "GET", "/v1/search", params=params)

        total = int(response.json().get("total", 0))
        logger.info("marklogic.estimate", query=query, directory=directory, total=total)
        return total

    async def search_uris(
        self,
        query: Optional[str],
        directory: Optional[str],
        start: int,
        page_length: int,
    ) -> List[str]:
        params = self._params(
            q=query,
            directory=_as_directory(directory),
            start=start,
            pageLength=page_length,
            format="json",
        )
        async with self._client() as client:
            response = await self._send(client, "GET", "/v1/search", params=params)

        results = response.json().get("results") or []
        uris = [result["uri"] for result in results if result.get("uri")]
        logger.debug("marklogic.search.page", start=start, count=len(uris))
        return uris

    async def read_document(self, uri: str) -> Document:
        async with self._client() as client:
            response = await self._send(
                client, "GET", "/v1/documents", params=self._params(uri=uri)
            )

        return Document(
            uri=uri,
            content=response.content,
            format=_document_format(response.headers),
        )

    async def write_documents(self, documents: Sequence[Document]) -> int:
        if not documents:
            return 0

        async with self._client() as client:
            for document in documents:
                await self._send(
                    client,
                    "PUT",
                    "/v1/documents",
                    params=self._params(uri=document.uri, format=document.format.value),
                    content=document.content,
                    headers={"Content-Type": document.format.content_type},
                )

        logger.info("marklogic.documents.written", count=len(documents))
        return len(documents)

    async def eval_xquery(self, query: str) -> str:
        logger.info("marklogic.eval.started", base_url=self.base_url)
        async with self._client() as client:
            response = await self._send(
                client,
                "POST",
                "/v1/eval",
                params=self._params(),
                data={"xquery": query},
            )
        return response.text

    async def ping(self) -> bool:
        try:
            async with self._client() as client:
                await self._send(client, "GET", "/v1/ping")
            return True
        except MarkLogicGatewayError:
            return False


def _as_directory(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return path if path.endswith("/") else f"{path}/"


def _document_format(headers: httpx.Headers) -> DocumentFormat:
    declared = headers.get(FORMAT_HEADER)
    if declared:
        try:
            return DocumentFormat(declared.lower())
        except ValueError:
            logger.warning("marklogic.unknown_document_format", format=declared)

    content_type = (headers.get("content-type") or "").lower()
    if "json" in content_type:
        return DocumentFormat.JSON
    if "xml" in content_type:
        return DocumentFormat.XML
    if content_type.startswith("text/"):
        return DocumentFormat.TEXT
    return DocumentFormat.BINARY
