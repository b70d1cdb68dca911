from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface

from shared.helper.HelperConfig import HelperConfig


class EmbedClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

        # model config, per engine (e.g. EMBED_GOOGLE_MODEL)
        self.embed_model = self.get_config_val("MODEL", default=self._get_default_model(), val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "embed"
        """
        return "embed"

    @abstractmethod
    def _get_default_model(self) -> str:
        """
        Returns the embedding model used when EMBED_{ENGINE}_MODEL is not set.
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def get_endpoint_embedding(self) -> str:
        """
        Returns the endpoint path for embedding requests.

        Returns:
            str: The endpoint path for embedding requests (e.g. "/embeddings")
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_embed_payload(self, text: str) -> dict:
        """Build the backend-specific request body for an embedding request.

        Args:
            text (str): The text to embed.

        Returns:
            dict: JSON-serialisable request body.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_embedding_from_response(self, response_data: dict) -> list[float]:
        """Extract the embedding vector from a raw embedding API response.

        Response format differs by backend:
        - Gemini embedContent: {"embedding": {"values": [...]}}
        - Supabase edge function: {"embedding": [...]}
        - OpenAI-compatible: {"data": [{"embedding": [...], "index": 0}]}

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            list[float]: The embedding vector.

        Raises:
            ValueError: If the response format is invalid or the vector is empty.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_embed(self, text: str) -> list[float]:
        """Send an embedding request and return the extracted vector.

        Args:
            text (str): The text to embed.

        Returns:
            list[float]: The embedding vector.

        Raises:
            ClientRequestError: If the backend answers with a non-2xx status.
            httpx.HTTPError: If the request cannot be sent or times out.
            ValueError: If the response does not contain a valid embedding.
        """
        body = self.get_embed_payload(text)
        response = await self.do_request(
            method="POST",
            endpoint=self.get_endpoint_embedding(),
            json=body,
            raise_on_error=True,
        )
        vector = self.extract_embedding_from_response(response.json())
        if not vector or not all(isinstance(v, (int, float)) for v in vector):
            raise ValueError(f"{self.get_engine_name()} returned an empty or non-numeric embedding.")
        return [float(v) for v in vector]
