from shared.helper.HelperConfig import HelperConfig
from shared.clients.store.StoreClientInterface import StoreClientInterface


class StoreClientManager:
    """
    Manager class to instantiate the configured document store client.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """
        Reads the store engine from ENV configuration.

        Returns:
            str: Capitalised engine name (e.g. "Supabase").

        Raises:
            ValueError: If STORE_ENGINE is not set or empty.
        """
        engine = self.helper_config.get_string_val("STORE_ENGINE", default="supabase")
        if not engine:
            raise ValueError("No store engine specified in configuration.")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> StoreClientInterface:
        """
        Initializes the store client for the configured engine.

        Raises:
            ValueError: If the engine is unsupported.
        """
        engine = self._get_engine_from_env()
        className = f"StoreClient{engine}"
        try:
            module = __import__(
                f"shared.clients.store.{engine.lower()}.{className}",
                fromlist=[className],
            )
            client_class = getattr(module, className)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported store engine specified: '{engine}'. Error: {e}")
        self.logging.debug(f"Instantiated store client for engine: {engine}")
        return client_class(helper_config=self.helper_config)

    def get_client(self) -> StoreClientInterface:
        """
        Returns the instantiated store client.

        Returns:
            StoreClientInterface: The store client instance.
        """
        return self.client
