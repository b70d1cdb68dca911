from abc import abstractmethod
from typing import Any, Awaitable, Callable

import httpx
from pydantic import ValidationError

from shared.clients.ClientInterface import ClientInterface, classify_failure
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import DocumentChunk, DocumentLink, NewDocumentChunk, SearchCandidate
from shared.models.search import (
    FailureKind,
    KeywordSearchRequest,
    StoreResult,
    SubstringSearchRequest,
    VectorSearchRequest,
)

CHUNK_COLUMNS = "id,title,content,source,category"


class StoreClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "store"
        """
        return "store"

    @abstractmethod
    def get_text_search_config(self) -> str:
        """
        Returns the full-text search language configuration (e.g. "russian").
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_vector_search(self) -> str:
        """
        Returns the endpoint path for vector similarity search (e.g. "/rest/v1/rpc/match_documents").
        """
        pass

    @abstractmethod
    def _get_endpoint_chunks(self) -> str:
        """
        Returns the endpoint path of the chunk collection, used for keyword and
        substring search as well as inserts (e.g. "/rest/v1/documents").
        """
        pass

    @abstractmethod
    def _get_endpoint_links(self) -> str:
        """
        Returns the endpoint path of the document link catalogue (e.g. "/rest/v1/document_links").
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_vector_search_payload(self, request: VectorSearchRequest) -> dict:
        """Builds the backend-specific body of a vector search request."""
        pass

    @abstractmethod
    def get_keyword_search_params(self, request: KeywordSearchRequest) -> dict:
        """Builds the backend-specific query parameters of a full-text search request."""
        pass

    @abstractmethod
    def get_substring_search_params(self, request: SubstringSearchRequest) -> dict:
        """Builds the backend-specific query parameters of an OR'd substring search."""
        pass

    @abstractmethod
    def get_insert_params(self) -> dict:
        """Builds the query parameters for inserting a row and returning it."""
        pass

    @abstractmethod
    def get_link_list_params(self) -> dict:
        """Builds the query parameters for listing document links, newest first."""
        pass

    @abstractmethod
    def get_link_delete_params(self, link_id: str | int) -> dict:
        """Builds the query parameters selecting a single document link for deletion."""
        pass

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    @abstractmethod
    def extract_rows(self, raw_response: Any) -> list[dict]:
        """
        Extracts the list of row dicts from a raw response.

        Raises:
            ValueError: If the response does not have the expected shape.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def _run_search(self, label: str, call: Callable[[], Awaitable[httpx.Response]]) -> StoreResult:
        """Execute a search call and convert any failure into a StoreResult.

        Args:
            label (str): Search method name for logging.
            call: Coroutine factory performing the HTTP request.

        Returns:
            StoreResult: Parsed candidates, or an empty result carrying the failure kind.
        """
        try:
            response = await call()
            rows = self.extract_rows(response.json())
            candidates = [SearchCandidate.model_validate(row) for row in rows]
        except ValidationError as exc:
            self.logging.warning("%s search on '%s' returned malformed rows: %s", label, self.get_engine_name(), exc)
            return StoreResult(failure=FailureKind.MALFORMED_RESPONSE, detail=str(exc)[:300])
        except Exception as exc:
            kind = classify_failure(exc)
            self.logging.warning("%s search on '%s' failed (%s): %s", label, self.get_engine_name(), kind.value, exc)
            return StoreResult(failure=kind, detail=str(exc)[:300])
        self.logging.debug("%s search on '%s' returned %d row(s).", label, self.get_engine_name(), len(candidates))
        return StoreResult(candidates=candidates)

    async def do_vector_search(self, request: VectorSearchRequest) -> StoreResult:
        """Run a vector similarity search.

        Args:
            request (VectorSearchRequest): Query vector, similarity threshold and result cap.

        Returns:
            StoreResult: Candidates ordered by similarity, with similarity set.
        """
        return await self._run_search(
            "Vector",
            lambda: self.do_request(
                method="POST",
                json=self.get_vector_search_payload(request),
                endpoint=self._get_endpoint_vector_search(),
                raise_on_error=True,
            ),
        )

    async def do_keyword_search(self, request: KeywordSearchRequest) -> StoreResult:
        """Run a full-text search over chunk content.

        Args:
            request (KeywordSearchRequest): Query text, language configuration and result cap.

        Returns:
            StoreResult: Matching candidates.
        """
        return await self._run_search(
            "Keyword",
            lambda: self.do_request(
                method="GET",
                params=self.get_keyword_search_params(request),
                endpoint=self._get_endpoint_chunks(),
                raise_on_error=True,
            ),
        )

    async def do_substring_search(self, request: SubstringSearchRequest) -> StoreResult:
        """Run one OR'd case-insensitive substring search over a single field.

        Args:
            request (SubstringSearchRequest): Terms, target field and result cap.

        Returns:
            StoreResult: Matching candidates; empty without a request when there are no terms.
        """
        if not request.terms:
            return StoreResult()
        return await self._run_search(
            "Substring",
            lambda: self.do_request(
                method="GET",
                params=self.get_substring_search_params(request),
                endpoint=self._get_endpoint_chunks(),
                raise_on_error=True,
            ),
        )

    async def do_insert_chunk(self, chunk: NewDocumentChunk) -> DocumentChunk:
        """Insert a chunk and return the stored row (id and title).

        Raises:
            ClientRequestError: If the store rejects the insert.
        """
        response = await self.do_request(
            method="POST",
            json=chunk.model_dump(),
            params=self.get_insert_params() | {"select": "id,title"},
            endpoint=self._get_endpoint_chunks(),
            additional_headers={"Prefer": "return=representation"},
            raise_on_error=True,
        )
        rows = self.extract_rows(response.json())
        if not rows:
            raise ValueError("Store did not return the inserted chunk.")
        return DocumentChunk.model_validate(rows[0])

    async def do_list_links(self) -> list[DocumentLink]:
        """Return all document links, newest first."""
        response = await self.do_request(
            method="GET",
            params=self.get_link_list_params(),
            endpoint=self._get_endpoint_links(),
            raise_on_error=True,
        )
        return [DocumentLink.model_validate(row) for row in self.extract_rows(response.json())]

    async def do_insert_link(self, link: DocumentLink) -> DocumentLink:
        """Insert a document link and return the stored row."""
        response = await self.do_request(
            method="POST",
            json=link.model_dump(exclude={"id", "created_at"}),
            params=self.get_insert_params(),
            endpoint=self._get_endpoint_links(),
            additional_headers={"Prefer": "return=representation"},
            raise_on_error=True,
        )
        rows = self.extract_rows(response.json())
        if not rows:
            raise ValueError("Store did not return the inserted document link.")
        return DocumentLink.model_validate(rows[0])

    async def do_delete_link(self, link_id: str | int) -> None:
        """Delete a document link by id."""
        await self.do_request(
            method="DELETE",
            params=self.get_link_delete_params(link_id),
            endpoint=self._get_endpoint_links(),
            raise_on_error=True,
        )
