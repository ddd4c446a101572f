from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str | None = None
    content: str | None = None


class ChatChoice(BaseModel):
    model_config = ConfigDict(extra="allow")

    index: int | None = None
    message: ChatMessage | None = None
    finish_reason: str | None = None


class ChatCompletion(BaseModel):
    """
    Chat-completion response as returned by an OpenAI-compatible API.

    Unknown fields are kept so the raw payload can be handed back to callers verbatim.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    model: str | None = None
    created: int | None = None
    usage: dict[str, Any] | None = None
    choices: list[ChatChoice] = Field(default_factory=list)

    def first_content(self) -> str | None:
        if not self.choices:
            return None
        message = self.choices[0].message
        if message is None:
            return None
        return message.content
