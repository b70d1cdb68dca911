from server.core.ContextAssembler import ContextMode, format_app_context, format_context
from server.core.HybridRetriever import HybridRetriever
from server.models.requests import ChatRequest
from server.models.responses import ChatResponse
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import DocumentChunk

SYSTEM_PROMPT = """Ты — юридический ИИ-помощник по делу № А73-19604/2025 (АО «Дальтрансуголь» против Приамурского МУ Росприроднадзора).

ВАЖНЫЕ ПРАВИЛА:
1. Отвечай ТОЛЬКО на основе документов из базы знаний, которые тебе предоставлены
2. Если документы не предоставлены или в них нет ответа — честно скажи: "В базе знаний нет информации по этому вопросу"
3. НЕ выдумывай факты, даты, номера документов или суммы
4. Всегда указывай источник: "Согласно документу [название]..."
5. Отвечай на русском языке, кратко и по существу

Если пользователь спрашивает какие документы ты использовал — перечисли только те, что были переданы в разделе "ДОКУМЕНТЫ ИЗ БАЗЫ ЗНАНИЙ"."""


def assemble_message(query: str, context_block: str, app_context_block: str = "") -> str:
    """Build the single outgoing chat message: the user's text followed by the context blocks."""
    return f"{query}{app_context_block}{context_block}"


def collect_sources(documents: list[DocumentChunk]) -> list[str]:
    """Knowledge base citations: each chunk's title, else its source; empty values dropped."""
    return [label for label in (doc.title or doc.source for doc in documents) if label]


class ChatService:
    """Answers a user message: retrieve → format context → chat completion → citations."""

    def __init__(
        self,
        helper_config: HelperConfig,
        retriever: HybridRetriever,
        llm_client: LLMClientInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._retriever = retriever
        self._llm_client = llm_client
        self.system_prompt = helper_config.get_string_val("CHAT_SYSTEM_PROMPT", default=SYSTEM_PROMPT)
        self.context_mode = ContextMode(helper_config.get_string_val("CONTEXT_MODE", default=ContextMode.VERBOSE.value).lower())

    ##########################################
    ############### CORE #####################
    ##########################################

    async def answer(self, request: ChatRequest) -> ChatResponse:
        """Produce a grounded answer for a chat request.

        Args:
            request (ChatRequest): The user message, history and optional app context.

        Returns:
            ChatResponse: Answer text with knowledge base and web citations.

        Raises:
            ValueError: If the message is missing.
            ClientRequestError: If the chat service rejects the request.
        """
        if not request.message or not request.message.strip():
            raise ValueError("Message is required")

        documents = await self._retriever.retrieve(request.message)
        context_block = format_context(documents, self.context_mode)
        message = assemble_message(
            request.message,
            context_block,
            format_app_context(request.app_context),
        )

        self.logging.info(
            "Sending chat request: history=%d turn(s), context documents=%d, message chars=%d.",
            len(request.history), len(documents), len(message),
        )
        completion = await self._llm_client.do_chat(
            system_instruction=self.system_prompt,
            history=request.history,
            message=message,
        )

        return ChatResponse(
            response=completion.text,
            sources=collect_sources(documents),
            web_sources=completion.web_citations,
        )
