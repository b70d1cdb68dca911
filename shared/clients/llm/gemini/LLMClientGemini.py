from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.chat import ChatCompletion, ChatTurn, WebCitation
from shared.models.config import EnvConfig


class LLMClientGemini(LLMClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default="https://generativelanguage.googleapis.com/v1beta", val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Gemini"

    def _get_default_model(self) -> str:
        return "gemini-3-flash-preview"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
            EnvConfig(env_key="WEB_GROUNDING", val_type="bool", default=False),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {"x-goog-api-key": self._api_key}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return f"/models/{self.chat_model}"

    def _get_endpoint_chat(self) -> str:
        return f"/models/{self.chat_model}:generateContent"

    ################ PAYLOAD BUILDER ##################
    def map_role(self, role: str) -> str:
        return "model" if role == "assistant" else "user"

    def get_chat_payload(self, system_instruction: str, history: list[ChatTurn], message: str) -> dict:
        """Build the Gemini generateContent request body.

        Returns:
            dict: {"systemInstruction": {...}, "contents": [...], "tools": [...]?}
        """
        contents = [
            {"role": self.map_role(turn.role), "parts": [{"text": turn.content}]}
            for turn in history
        ]
        contents.append({"role": "user", "parts": [{"text": message}]})
        payload: dict = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": contents,
        }
        if self.web_grounding:
            payload["tools"] = [{"google_search": {}}]
        return payload

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_chat_response(self, response_data: dict) -> ChatCompletion:
        """Extract the reply text and web grounding citations from a generateContent response.

        Raises:
            ValueError: If the response has no candidate text (e.g. the prompt was blocked).
        """
        candidates = response_data.get("candidates") or []
        if not candidates:
            feedback = response_data.get("promptFeedback", {})
            raise ValueError(f"Gemini response contains no candidates. Prompt feedback: {feedback}")

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text:
            raise ValueError(
                "Gemini response does not contain answer text. "
                f"Finish reason: {candidate.get('finishReason')}"
            )

        citations: list[WebCitation] = []
        seen_urls: set[str] = set()
        grounding = candidate.get("groundingMetadata") or {}
        for chunk in grounding.get("groundingChunks") or []:
            web = chunk.get("web") or {}
            url = web.get("uri")
            if not url or url in seen_urls:
                continue
            seen_urls.add(url)
            citations.append(WebCitation(title=web.get("title") or url, url=url))

        return ChatCompletion(text=text, web_citations=citations)
