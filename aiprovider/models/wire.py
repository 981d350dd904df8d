"""Provider-neutral view of the JSON exchanged with a provider endpoint.

Both backends build a ``WireRequest`` and parse their reply into a
``WireResponse``; field names follow the Claude Messages API, and the OpenAI
adapter maps ``choices``/``finish_reason`` onto them.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class WireMessage:
    role: str       # "user" or "assistant"
    content: str


@dataclass(frozen=True)
class WireRequest:
    model: str
    max_tokens: int
    temperature: float
    messages: tuple = ()    # tuple[WireMessage, ...]
    system: str = ""        # top-level system text; omitted when empty

    def to_dict(self) -> dict:
        data = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
        }
        if self.system:
            data["system"] = self.system
        return data


@dataclass
class ContentBlock:
    type: str       # always "text" for the calls made here
    text: str = ""


@dataclass
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class WireResponse:
    content: list = field(default_factory=list)     # list[ContentBlock], provider order
    stop_reason: str = ""
    id: str = ""
    type: str = ""
    role: str = ""
    model: str = ""
    stop_sequence: Optional[str] = None
    usage: Usage = field(default_factory=Usage)

    @property
    def primary_text(self) -> str:
        """Text of the first content block, or ``""`` when there is none."""
        return self.content[0].text if self.content else ""
