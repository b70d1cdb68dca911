from abc import ABC, abstractmethod
from typing import Any

import httpx
from httpx._types import QueryParamTypes

from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.search import FailureKind


class ClientRequestError(Exception):
    """A backend answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


def classify_failure(exc: Exception) -> FailureKind:
    """Name the failure behind an exception raised around a backend call.

    Timeouts are checked before the generic transport error because
    httpx.TimeoutException is a subclass of httpx.HTTPError. Parsing errors
    (ValueError, KeyError, ...) mean the backend answered with something
    other than what the client expects.
    """
    if isinstance(exc, httpx.TimeoutException):
        return FailureKind.TIMEOUT
    if isinstance(exc, ClientRequestError):
        return FailureKind.HTTP_ERROR
    if isinstance(exc, httpx.HTTPError):
        return FailureKind.UNAVAILABLE
    if isinstance(exc, (ValueError, KeyError, TypeError, IndexError)):
        return FailureKind.MALFORMED_RESPONSE
    return FailureKind.UNAVAILABLE


class ClientInterface(ABC):
    """Base of every backend client (embedding engines, document store, chat model).

    Subclasses name their type and engine; settings are then read from
    {TYPE}_{ENGINE}_{KEY} variables, e.g. STORE_SUPABASE_BASE_URL.
    The httpx client is created by boot() and released by close().
    """

    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0)

        self._client: httpx.AsyncClient | None = None
        self.validate_full_configuration()

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """Read every declared setting once so a missing one fails at construction.

        Raises:
            ValueError: If a required setting is absent or malformed.
        """
        for config in self._get_required_config():
            self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    def is_booted(self) -> bool:
        return self._client is not None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        """Client family used as the settings prefix: "embed", "store" or "llm"."""
        pass

    def get_engine_name(self) -> str:
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """Engine name as it appears in EMBED_ENGINES / STORE_ENGINE / LLM_ENGINE, e.g. "Supabase"."""
        pass

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """Settings this engine reads, validated when the client is constructed."""
        pass

    def _get_config_key_name(self, raw_key: str) -> str:
        return f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}_{raw_key.upper()}"

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """Read one of this engine's settings.

        Args:
            raw_key (str): Key without prefix, e.g. "API_KEY" for LLM_GEMINI_API_KEY.
            default (Any): Value used when the setting is absent; None makes it required.
            val_type (str): "string", "number", "bool" or "list".

        Raises:
            ValueError: If the setting is required but absent, or val_type is unknown.
        """
        key = self._get_config_key_name(raw_key)
        readers = {
            "string": self._helper_config.get_string_val,
            "number": self._helper_config.get_number_val,
            "bool": self._helper_config.get_bool_val,
            "list": self._helper_config.get_list_val,
        }
        if val_type not in readers:
            raise ValueError(f"Unsupported config value type '{val_type}' for '{key}'.")
        return readers[val_type](key, default=default)

    ################ AUTH ##################
    @abstractmethod
    def _get_auth_header(self) -> dict:
        """Headers carrying the engine's credentials; merged into every request."""
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_base_url(self) -> str:
        """Root URL every endpoint path is appended to, e.g. "https://xyz.supabase.co"."""
        pass

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """Cheap GET path used at startup to prove the backend is reachable."""
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> httpx.Response:
        """GET the healthcheck endpoint; the caller decides what a failing status means."""
        return await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck())

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self) -> None:
        self._client = httpx.AsyncClient(timeout=self.timeout)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_request(
        self,
        method: str = "GET",
        json: dict | list | None = None,
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        additional_headers: dict | None = None,
        raise_on_error: bool = False,
    ) -> httpx.Response:
        """Send one request to {base_url}{endpoint} with the engine's auth headers.

        Args:
            method: HTTP verb.
            json: Request body, sent as JSON when given.
            params: Query string parameters (PostgREST filters live here).
            endpoint: Path below the base URL; the leading slash is optional.
            additional_headers: Per-request headers, e.g. Prefer for PostgREST writes.
            raise_on_error: Turn a non-2xx answer into ClientRequestError.

        Raises:
            RuntimeError: If boot() has not been called.
            ClientRequestError: On a non-2xx answer when raise_on_error is set.
            httpx.HTTPError: On transport failures and timeouts.
        """
        if self._client is None:
            raise RuntimeError(f"{self.get_client_type()} client '{self.get_engine_name()}' is not booted.")

        path = endpoint.strip().lstrip("/")
        url = f"{self._get_base_url().rstrip('/')}/{path}" if path else self._get_base_url().rstrip("/")
        headers = {**self._get_auth_header(), **(additional_headers or {})}

        response = await self._client.request(
            method,
            url,
            headers=headers,
            params=params,
            json=json,
            timeout=self.timeout,
        )

        if raise_on_error and not response.is_success:
            self.logging.error("%s %s answered %d: %s", method, url, response.status_code, response.text[:300])
            raise ClientRequestError(f"{method} {url} failed with status {response.status_code}", status_code=response.status_code)
        return response
