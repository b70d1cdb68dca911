from shared.helper.HelperConfig import HelperConfig
from shared.clients.llm.LLMClientInterface import LLMClientInterface


class LLMClientManager:
    """Manager class to instantiate the configured LLM client."""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """Read the LLM engine name from env configuration.

        Returns:
            str: Capitalised engine name (e.g. "Gemini").

        Raises:
            ValueError: If LLM_ENGINE is empty.
        """
        engine = self.helper_config.get_string_val("LLM_ENGINE", default="gemini")
        if not engine:
            raise ValueError("No LLM engine specified in configuration.")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> LLMClientInterface:
        """Instantiate the LLM client class for the configured engine.

        Returns:
            LLMClientInterface: The instantiated client.

        Raises:
            ValueError: If the engine is unsupported.
        """
        engine = self._get_engine_from_env()
        className = f"LLMClient{engine}"
        try:
            module = __import__(
                f"shared.clients.llm.{engine.lower()}.{className}",
                fromlist=[className],
            )
            client_class = getattr(module, className)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported LLM engine specified: '{engine}'. Error: {e}")
        self.logging.debug("Instantiated LLM client for engine: %s", engine)
        return client_class(helper_config=self.helper_config)

    def get_client(self) -> LLMClientInterface:
        """Return the instantiated LLM client.

        Returns:
            LLMClientInterface: The LLM client instance.
        """
        return self.client
