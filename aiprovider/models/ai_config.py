"""Provider configuration as handed to the client factory."""

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class AIConfig:
    provider: str                                   # "claude" or "openai"
    api_key: str = field(default="", repr=False)
    base_url: Optional[str] = None
    model: str = ""
    max_tokens: int = 0
    temperature: float = 0.0

    def with_defaults(self, model: str, max_tokens: int, temperature: float) -> "AIConfig":
        """Return a copy with zero-valued fields replaced by the given defaults.

        A temperature of exactly 0.0 counts as unset, so callers cannot ask for
        fully greedy sampling through this config.
        """
        return replace(
            self,
            model=self.model or model,
            max_tokens=self.max_tokens or max_tokens,
            temperature=self.temperature or temperature,
        )
