from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.chat import ChatCompletion, ChatTurn


class LLMClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

        # chat / completion config, per engine (e.g. LLM_GEMINI_MODEL)
        self.chat_model = self.get_config_val("MODEL", default=self._get_default_model(), val_type="string")
        self.web_grounding = self.get_config_val("WEB_GROUNDING", default=False, val_type="bool")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "llm"

    @abstractmethod
    def _get_default_model(self) -> str:
        """Returns the chat model used when LLM_{ENGINE}_MODEL is not set."""
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_chat(self) -> str:
        """Returns the endpoint path for chat/completion requests (e.g. "/models/x:generateContent")."""
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def map_role(self, role: str) -> str:
        """Map an application role ("user" / "assistant") onto the backend's vocabulary."""
        pass

    @abstractmethod
    def get_chat_payload(self, system_instruction: str, history: list[ChatTurn], message: str) -> dict:
        """Build the backend-specific request body for a chat/completion request.

        Args:
            system_instruction (str): Static instruction for the model.
            history (list[ChatTurn]): Prior turns, oldest first.
            message (str): The outgoing user message (query plus context).

        Returns:
            dict: JSON-serialisable request body.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_chat_response(self, response_data: dict) -> ChatCompletion:
        """Extract the assistant reply and grounding citations from a raw chat API response.

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            ChatCompletion: The reply text and any web citations.

        Raises:
            ValueError: If the response does not contain a valid reply.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_chat(self, system_instruction: str, history: list[ChatTurn], message: str) -> ChatCompletion:
        """Send a chat/completion request and return the assistant reply.

        Args:
            system_instruction (str): Static instruction for the model.
            history (list[ChatTurn]): Prior turns, oldest first.
            message (str): The outgoing user message.

        Returns:
            ChatCompletion: The reply text and any web citations.

        Raises:
            ClientRequestError: If the backend answers with a non-2xx status.
            ValueError: If the response does not contain a valid reply.
        """
        body = self.get_chat_payload(system_instruction, history, message)
        response = await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_chat(),
            json=body,
            raise_on_error=True,
        )
        return self.extract_chat_response(response.json())
