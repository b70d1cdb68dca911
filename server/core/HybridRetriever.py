"""Hybrid retriever: vector, keyword and substring search merged by strict priority.

Flow: embed query → vector search ∥ keyword search → substring fallback only
when both are empty → first-seen-wins merge by chunk id → truncate to limit.
The public retrieve() never fails for backend problems; it returns [] instead.
"""

import asyncio
import re

from shared.clients.ClientInterface import classify_failure
from shared.clients.embed.EmbeddingProvider import EmbeddingProvider
from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import DocumentChunk, SearchCandidate
from shared.models.search import (
    KeywordSearchRequest,
    StoreResult,
    SubstringSearchRequest,
    VectorSearchRequest,
)

DEFAULT_LIMIT = 5
DEFAULT_MATCH_THRESHOLD = 0.5
DEFAULT_MIN_TERM_LENGTH = 3

# Document identifiers that must survive the term filter as-is
IDENTIFIER_PATTERNS = [
    re.compile(r"№\s*[\w\-/.]*\d[\w\-/.]*"),      # numbered references: № 15, №037-2023
    re.compile(r"\b\d{1,2}\.\d{1,2}\.\d{2,4}\b"),  # numeric dates: 12.03.2024
    re.compile(r"\b\d+(?:[-/]\d+)+\b"),            # numeric codes: 037-2023, А73/19604
]

_TOKEN_STRIP = " \t\n\"'«»“”„()[]{}<>.,;:!?"


def extract_search_terms(query: str, min_term_length: int = DEFAULT_MIN_TERM_LENGTH) -> list[str]:
    """Pick the query tokens worth a literal substring search.

    Keeps tokens longer than min_term_length or containing a digit, plus
    anything matching an identifier pattern. Deduplicated case-insensitively,
    first occurrence wins.

    Args:
        query (str): The raw user query.
        min_term_length (int): Tokens of this length or shorter are dropped unless they contain a digit.

    Returns:
        list[str]: Search terms in query order; empty when nothing qualifies.
    """
    terms: list[str] = []
    for raw_token in query.split():
        token = raw_token.strip(_TOKEN_STRIP)
        if not token:
            continue
        if len(token) > min_term_length or any(ch.isdigit() for ch in token):
            terms.append(token)

    for pattern in IDENTIFIER_PATTERNS:
        for match in pattern.findall(query):
            terms.append(match.strip(_TOKEN_STRIP))

    seen: set[str] = set()
    unique_terms: list[str] = []
    for term in terms:
        key = term.lower()
        if term and key not in seen:
            seen.add(key)
            unique_terms.append(term)
    return unique_terms


def merge_results(result_lists: list[list[SearchCandidate]], limit: int) -> list[DocumentChunk]:
    """Merge ranked candidate lists by priority, keeping the first occurrence of every id.

    Args:
        result_lists (list[list[SearchCandidate]]): Candidate lists, highest priority first.
        limit (int): Maximum number of chunks returned.

    Returns:
        list[DocumentChunk]: Deduplicated chunks, at most limit long.
    """
    merged: list[DocumentChunk] = []
    seen_ids: set = set()
    for candidates in result_lists:
        for candidate in candidates:
            if candidate.id in seen_ids:
                continue
            seen_ids.add(candidate.id)
            merged.append(candidate.to_chunk())
    return merged[:limit]


class HybridRetriever:
    """Finds the knowledge base chunks relevant to a free-text query."""

    def __init__(
        self,
        helper_config: HelperConfig,
        embedding_provider: EmbeddingProvider,
        store_client: StoreClientInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._embedder = embedding_provider
        self._store = store_client

        self.default_limit = int(helper_config.get_number_val("RETRIEVAL_LIMIT", default=DEFAULT_LIMIT))
        self.match_threshold = float(helper_config.get_number_val("RETRIEVAL_MATCH_THRESHOLD", default=DEFAULT_MATCH_THRESHOLD))
        self.min_term_length = int(helper_config.get_number_val("RETRIEVAL_MIN_TERM_LENGTH", default=DEFAULT_MIN_TERM_LENGTH))

    ##########################################
    ################ CORE ####################
    ##########################################

    async def retrieve(self, query: str, limit: int | None = None) -> list[DocumentChunk]:
        """Return up to limit chunks relevant to the query, best sources first.

        Args:
            query (str): The user query.
            limit (int | None): Result cap; defaults to RETRIEVAL_LIMIT.

        Returns:
            list[DocumentChunk]: Merged chunks. Empty when nothing relevant was
                found or every backend failed.

        Raises:
            ValueError: If the query is missing or blank, or limit is not positive.
        """
        if query is None or not query.strip():
            raise ValueError("Query text is required.")
        limit = self.default_limit if limit is None else limit
        if limit <= 0:
            raise ValueError(f"Limit must be positive, got {limit}.")

        try:
            return await self._retrieve(query.strip(), limit)
        except Exception as exc:
            self.logging.error("Retrieval failed unexpectedly for query=%r: %s", query[:80], exc)
            return []

    async def _retrieve(self, query: str, limit: int) -> list[DocumentChunk]:
        vector_result, keyword_result = await asyncio.gather(
            self._vector_search(query, limit),
            self._keyword_search(query, limit),
        )

        substring_candidates: list[SearchCandidate] = []
        if not vector_result.candidates and not keyword_result.candidates:
            substring_candidates = await self._substring_search(query, limit)

        merged = merge_results(
            [vector_result.candidates, keyword_result.candidates, substring_candidates],
            limit,
        )
        self.logging.info(
            "Retrieved %d chunk(s) for query=%r (vector=%d, keyword=%d, substring=%d).",
            len(merged),
            query[:80],
            len(vector_result.candidates),
            len(keyword_result.candidates),
            len(substring_candidates),
        )
        return merged

    ##########################################
    ############### METHODS ##################
    ##########################################

    async def _vector_search(self, query: str, limit: int) -> StoreResult:
        try:
            embed_result = await self._embedder.embed(query)
            if not embed_result.ok:
                self.logging.info("Vector search skipped: query embedding unavailable (%s).", embed_result.failure)
                return StoreResult(failure=embed_result.failure)
            return await self._store.do_vector_search(
                VectorSearchRequest(
                    embedding=embed_result.vector,
                    match_threshold=self.match_threshold,
                    match_count=limit,
                )
            )
        except Exception as exc:
            return self._path_failed("Vector", exc)

    async def _keyword_search(self, query: str, limit: int) -> StoreResult:
        try:
            return await self._store.do_keyword_search(
                KeywordSearchRequest(
                    query=query,
                    limit=limit,
                    text_search_config=self._store.get_text_search_config(),
                )
            )
        except Exception as exc:
            return self._path_failed("Keyword", exc)

    def _path_failed(self, label: str, exc: Exception) -> StoreResult:
        """One search path failed; the other paths still count."""
        kind = classify_failure(exc)
        self.logging.warning("%s search path failed (%s): %s", label, kind.value, exc)
        return StoreResult(failure=kind, detail=str(exc)[:300])

    async def _substring_search(self, query: str, limit: int) -> list[SearchCandidate]:
        """Literal fallback: titles first, then content, stop at the first hit."""
        terms = extract_search_terms(query, self.min_term_length)
        if not terms:
            self.logging.debug("Substring fallback skipped: no meaningful terms in query=%r.", query[:80])
            return []

        self.logging.info("Vector and keyword search found nothing; substring fallback with terms %s.", terms)
        for field in ("title", "content"):
            result = await self._store.do_substring_search(
                SubstringSearchRequest(terms=terms, field=field, limit=limit)
            )
            if result.candidates:
                return result.candidates
        return []
