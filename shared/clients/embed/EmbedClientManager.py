from shared.helper.HelperConfig import HelperConfig
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface

MAX_EMBED_ENGINES = 2  # primary + exactly one fallback


class EmbedClientManager:
    """
    Manager class to handle the primary and fallback Embed clients based on configuration.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.clients = self._initialize_clients()

    def _get_engines_from_env(self) -> list[str]:
        """
        Reads the ordered list of Embed engines from ENV configuration, e.g. "[google,supabase]".

        Returns:
            list[str]: Capitalised engine names, primary first.

        Raises:
            ValueError: If no Embed engine is specified in the configuration.
        """
        engines = self.helper_config.get_list_val("EMBED_ENGINES")
        if not engines:
            raise ValueError("No Embed engines specified in configuration.")

        #lowercase all and uppcercase first letter for better comparison and display
        engines = [engine.strip().lower().capitalize() for engine in engines]
        if len(engines) > MAX_EMBED_ENGINES:
            self.logging.warning(
                "EMBED_ENGINES lists %d engines; only the primary and one fallback are used: %s",
                len(engines), engines[:MAX_EMBED_ENGINES],
            )
            engines = engines[:MAX_EMBED_ENGINES]
        return engines

    def _initialize_clients(self) -> list[EmbedClientInterface]:
        """
        Initializes the Embed clients in configuration order.

        Returns:
            list[EmbedClientInterface]: The primary client, followed by the fallback client if configured.

        Raises:
            ValueError: If an engine is unsupported.
        """
        clients = []
        for engine in self._get_engines_from_env():
            className = f"EmbedClient{engine}"
            # try to import the class from shared.clients.embed.{engine}
            try:
                module = __import__(
                    f"shared.clients.embed.{engine.lower()}.{className}",
                    fromlist=[className],
                )
                client_class = getattr(module, className)
            except (ImportError, AttributeError) as e:
                raise ValueError(f"Unsupported Embed engine specified: '{engine}'. Error: {e}")
            clients.append(client_class(helper_config=self.helper_config))
            self.logging.debug(f"Instantiated Embed client for engine: {engine}")
        return clients

    def get_clients(self) -> list[EmbedClientInterface]:
        """
        Returns the instantiated Embed clients, primary first.

        Returns:
            list[EmbedClientInterface]: The Embed client instances.
        """
        return self.clients
