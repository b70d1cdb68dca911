from typing import Any

from shared.clients.store.StoreClientInterface import CHUNK_COLUMNS, StoreClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.search import KeywordSearchRequest, SubstringSearchRequest, VectorSearchRequest

SUBSTRING_FIELDS = ("title", "content")


def _escape_like_pattern(value: str) -> str:
    """Make LIKE metacharacters in a search term match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _quote_filter_value(value: str) -> str:
    """Quote a value for a PostgREST logical filter so commas and parentheses stay literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class StoreClientSupabase(StoreClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")
        self._table = self.get_config_val("TABLE", default="documents", val_type="string")
        self._links_table = self.get_config_val("LINKS_TABLE", default="document_links", val_type="string")
        self._match_function = self.get_config_val("MATCH_FUNCTION", default="match_documents", val_type="string")
        self._text_search_config = self.get_config_val("TEXT_SEARCH_CONFIG", default="russian", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Supabase"

    def get_text_search_config(self) -> str:
        return self._text_search_config

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
            EnvConfig(env_key="TABLE", val_type="string", default="documents"),
            EnvConfig(env_key="LINKS_TABLE", val_type="string", default="document_links"),
            EnvConfig(env_key="MATCH_FUNCTION", val_type="string", default="match_documents"),
            EnvConfig(env_key="TEXT_SEARCH_CONFIG", val_type="string", default="russian"),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {"apikey": self._api_key, "Authorization": f"Bearer {self._api_key}"}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/rest/v1/"

    def _get_endpoint_vector_search(self) -> str:
        return f"/rest/v1/rpc/{self._match_function}"

    def _get_endpoint_chunks(self) -> str:
        return f"/rest/v1/{self._table}"

    def _get_endpoint_links(self) -> str:
        return f"/rest/v1/{self._links_table}"

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def get_vector_search_payload(self, request: VectorSearchRequest) -> dict:
        return {
            "query_embedding": request.embedding,
            "match_threshold": request.match_threshold,
            "match_count": request.match_count,
        }

    def get_keyword_search_params(self, request: KeywordSearchRequest) -> dict:
        # wfts = websearch_to_tsquery, tolerant of free-form user input
        config = request.text_search_config or self._text_search_config
        return {
            "select": CHUNK_COLUMNS,
            "content": f"wfts({config}).{request.query}",
            "limit": request.limit,
        }

    def get_substring_search_params(self, request: SubstringSearchRequest) -> dict:
        if request.field not in SUBSTRING_FIELDS:
            raise ValueError(f"Substring search is only supported on {SUBSTRING_FIELDS}, got '{request.field}'.")
        conditions = ",".join(
            f"{request.field}.ilike.{_quote_filter_value(f'*{_escape_like_pattern(term)}*')}" for term in request.terms
        )
        return {
            "select": CHUNK_COLUMNS,
            "or": f"({conditions})",
            "limit": request.limit,
        }

    def get_insert_params(self) -> dict:
        return {"select": "*"}

    def get_link_list_params(self) -> dict:
        return {"select": "*", "order": "created_at.desc"}

    def get_link_delete_params(self, link_id: str | int) -> dict:
        return {"id": f"eq.{link_id}"}

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def extract_rows(self, raw_response: Any) -> list[dict]:
        if raw_response is None:
            return []
        if isinstance(raw_response, dict):
            # single-object responses (e.g. Accept: vnd.pgrst.object)
            return [raw_response]
        if not isinstance(raw_response, list) or not all(isinstance(row, dict) for row in raw_response):
            raise ValueError(f"Unexpected PostgREST response shape: {str(raw_response)[:200]}")
        return raw_response
