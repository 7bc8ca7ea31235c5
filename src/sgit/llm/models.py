"""Wire models for the chat-completion API."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ChatMessage(BaseModel):
    """A single chat message."""

    role: str
    content: Optional[str] = None


class ChatRequest(BaseModel):
    """Request body for one stateless exchange.

    Each exchange carries exactly one user message; no history is kept
    between calls.
    """

    model: str = Field(..., min_length=1)
    messages: list[ChatMessage]
    stream: bool = False

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, v: list[ChatMessage]) -> list[ChatMessage]:
        """Require a single user message."""
        if len(v) != 1 or v[0].role != "user":
            raise ValueError("A chat exchange carries exactly one user message")
        return v

    @classmethod
    def for_prompt(cls, model: str, prompt: str, stream: bool = False) -> "ChatRequest":
        return cls(model=model, messages=[ChatMessage(role="user", content=prompt)], stream=stream)


class ChatChoice(BaseModel):
    message: ChatMessage


class ChatResponse(BaseModel):
    """Blocking response envelope."""

    choices: list[ChatChoice] = Field(default_factory=list)


class StreamDelta(BaseModel):
    content: Optional[str] = None


class StreamChoice(BaseModel):
    delta: StreamDelta = Field(default_factory=StreamDelta)


class StreamChunk(BaseModel):
    """One server-sent event of a streaming response."""

    choices: list[StreamChoice] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Concatenated delta content of this chunk."""
        return "".join(choice.delta.content or "" for choice in self.choices)
