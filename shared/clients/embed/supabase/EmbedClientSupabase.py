from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class EmbedClientSupabase(EmbedClientInterface):
    """Embeds text through the project's "embed" Supabase Edge Function.

    The edge function picks its own provider and model, so EMBED_SUPABASE_MODEL
    is informational only.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")
        self._function_name = self.get_config_val("FUNCTION", default="embed", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Supabase"

    def _get_default_model(self) -> str:
        return "edge-function"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
            EnvConfig(env_key="FUNCTION", val_type="string", default="embed"),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {"Authorization": f"Bearer {self._api_key}", "apikey": self._api_key}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/rest/v1/"

    def get_endpoint_embedding(self) -> str:
        return f"/functions/v1/{self._function_name}"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, text: str) -> dict:
        return {"text": text}

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embedding_from_response(self, response_data: dict) -> list[float]:
        embedding = response_data.get("embedding")
        if not embedding or not isinstance(embedding, list):
            raise ValueError(
                "Edge function response does not contain a valid embedding. "
                f"Response: {str(response_data)[:200]}"
            )
        return embedding
