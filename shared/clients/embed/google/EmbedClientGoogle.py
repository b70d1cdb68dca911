from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class EmbedClientGoogle(EmbedClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default="https://generativelanguage.googleapis.com/v1beta", val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Google"

    def _get_default_model(self) -> str:
        return "text-embedding-004"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {"x-goog-api-key": self._api_key}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return f"/models/{self.embed_model}"

    def get_endpoint_embedding(self) -> str:
        return f"/models/{self.embed_model}:embedContent"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, text: str) -> dict:
        """Build the Gemini embedContent request body.

        Args:
            text (str): The text to embed.

        Returns:
            dict: {"model": "models/...", "content": {"parts": [{"text": "..."}]}}
        """
        return {
            "model": f"models/{self.embed_model}",
            "content": {"parts": [{"text": text}]},
        }

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embedding_from_response(self, response_data: dict) -> list[float]:
        values = (response_data.get("embedding") or {}).get("values")
        if not values:
            raise ValueError(
                "Gemini response does not contain a valid embedding. "
                f"Response keys: {list(response_data.keys())}"
            )
        return values
