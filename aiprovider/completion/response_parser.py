"""Turn a provider reply into suggestions, generated code and a confidence score.

Only the first content block is considered; anything after it is ignored.
"""

from typing import Optional

from ..models.wire import WireResponse

FENCE = "```"

# Fence info strings whose line is dropped when unwrapping a code block.
LANGUAGE_TAGS = frozenset({
    "typescript", "ts", "tsx",
    "javascript", "js", "jsx",
    "python", "py",
    "go", "golang",
    "java", "kotlin", "scala",
    "csharp", "c#", "cs",
    "c", "cpp", "c++",
    "rust", "ruby", "php", "swift",
    "bash", "sh", "shell",
    "sql", "json", "yaml", "html", "css",
})

BASE_CONFIDENCE = 0.7
LONG_RESPONSE_CHARS = 50
LONG_RESPONSE_BONUS = 0.1

# Claude stop_reason and OpenAI finish_reason values share one table.
STOP_REASON_ADJUSTMENTS = {
    "end_turn": 0.2,
    "stop": 0.2,
    "max_tokens": -0.1,
    "length": -0.1,
    "stop_sequence": 0.1,
    "content_filter": -0.3,
}


def extract_suggestions(response: WireResponse) -> list:
    """Split the primary text into one suggestion per non-blank line.

    Only newline characters separate lines, so form feeds and other Unicode
    breaks stay inside a suggestion. Lines are stripped, which also drops a
    trailing carriage return. Text made only of whitespace comes back as a
    single suggestion holding the original text, so non-empty input never
    yields ``[]``.
    """
    text = response.primary_text
    if not text:
        return []

    suggestions = [line.strip() for line in text.split("\n") if line.strip()]
    if not suggestions:
        return [text]
    return suggestions


def extract_code(response: WireResponse) -> str:
    """Return the primary text with markdown code fences removed.

    A leading fence loses its language tag line when the tag is in
    ``LANGUAGE_TAGS``. Unfenced text is only trimmed.
    """
    if not response.content:
        return ""

    text = response.primary_text.strip()
    if text.startswith(FENCE):
        text = text[len(FENCE):]
        first_line, newline, rest = text.partition("\n")
        if newline and first_line.strip().lower() in LANGUAGE_TAGS:
            text = rest
    if text.endswith(FENCE):
        text = text[: -len(FENCE)]
    return text.strip()


def calculate_confidence(response: WireResponse, empty_score: Optional[float] = None) -> float:
    """Heuristic quality score in [0.0, 1.0] from stop reason and length.

    Args:
        response: Parsed provider reply.
        empty_score: Score to return outright when the reply has no content
            blocks. ``None`` scores such replies like any other.
    """
    if not response.content and empty_score is not None:
        return empty_score

    confidence = BASE_CONFIDENCE
    confidence += STOP_REASON_ADJUSTMENTS.get(response.stop_reason, 0.0)
    if len(response.primary_text) > LONG_RESPONSE_CHARS:
        confidence += LONG_RESPONSE_BONUS

    return min(1.0, max(0.0, round(confidence, 4)))
