"""Pydantic models exchanged with the chat-completion service."""

from typing import Literal

from pydantic import BaseModel


class ChatTurn(BaseModel):
    """One prior turn of the conversation, in the application's role vocabulary."""

    role: Literal["user", "assistant"]
    content: str


class WebCitation(BaseModel):
    """A web source attributed by the chat service's search grounding."""

    title: str
    url: str


class ChatCompletion(BaseModel):
    """Answer text returned by the chat service plus optional grounding citations."""

    text: str
    web_citations: list[WebCitation] = []
