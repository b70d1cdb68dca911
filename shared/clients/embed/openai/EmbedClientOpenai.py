from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class EmbedClientOpenai(EmbedClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default="https://api.openai.com/v1", val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Openai"

    def _get_default_model(self) -> str:
        return "text-embedding-3-small"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default="https://api.openai.com/v1"),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/models"

    def get_endpoint_embedding(self) -> str:
        return "/embeddings"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, text: str) -> dict:
        """Build the OpenAI-compatible embedding request body.

        Args:
            text (str): The text to embed.

        Returns:
            dict: {"model": "...", "input": "..."}
        """
        return {"model": self.embed_model, "input": text}

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embedding_from_response(self, response_data: dict) -> list[float]:
        """Extract the first embedding from an OpenAI-compatible /embeddings response.

        Items carry an "index" field and are not guaranteed to be ordered.
        """
        data = response_data.get("data")
        if not data:
            raise ValueError(
                "OpenAI response does not contain embedding data. "
                f"Response keys: {list(response_data.keys())}"
            )
        ordered = sorted(data, key=lambda item: item.get("index", 0))
        return ordered[0].get("embedding") or []
