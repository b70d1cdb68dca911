"""Embedding provider adapter: one primary engine, one fallback, never raises.

A query that cannot be embedded is a normal outcome: the caller gets an
EmbedResult without a vector and continues with keyword search only.
"""

from shared.clients.ClientInterface import classify_failure
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.search import EmbedResult, FailureKind


class EmbeddingProvider:
    """Turns text into a vector using a primary and an optional fallback embed client."""

    def __init__(
        self,
        helper_config: HelperConfig,
        embed_clients: list[EmbedClientInterface],
    ) -> None:
        self.logging = helper_config.get_logger()
        self._clients = embed_clients[:2]
        self.max_chars = int(helper_config.get_number_val("EMBED_MAX_CHARS", default=8000))

    def get_engine_names(self) -> list[str]:
        return [client.get_engine_name() for client in self._clients]

    ##########################################
    ################ CORE ####################
    ##########################################

    async def embed(self, text: str) -> EmbedResult:
        """Embed a text, trying the primary engine and then exactly one fallback.

        Args:
            text (str): The text to embed. Truncated to EMBED_MAX_CHARS.

        Returns:
            EmbedResult: The vector and the engine that produced it, or the
                failure kind of the last attempt when no engine succeeded.
        """
        if not self._clients:
            return EmbedResult(failure=FailureKind.NOT_CONFIGURED)
        if not text or not text.strip():
            self.logging.debug("Embedding skipped: blank text.")
            return EmbedResult(failure=FailureKind.EMPTY_INPUT)

        bounded = text[: self.max_chars]
        last_failure = FailureKind.UNAVAILABLE
        for position, client in enumerate(self._clients):
            engine = client.get_engine_name()
            try:
                vector = await client.do_embed(bounded)
            except Exception as exc:
                last_failure = classify_failure(exc)
                self.logging.warning(
                    "Embedding via %s engine '%s' failed (%s): %s",
                    "primary" if position == 0 else "fallback",
                    engine,
                    last_failure.value,
                    exc,
                )
                continue
            if position > 0:
                self.logging.info("Embedding served by fallback engine '%s'.", engine)
            return EmbedResult(vector=vector, engine=engine)

        self.logging.warning("Embedding unavailable; retrieval continues without vector search.")
        return EmbedResult(failure=last_failure)
