"""Build the completion and code-generation prompts sent to the provider.

Sections are appended in a fixed order and only when they have content:
preamble, current function, imports, project type, style preferences, payload.
The labels below are matched literally by callers and tests.
"""

import json

from ..errors import InvalidRequestError
from ..models.requests import CodeContext, CodeGenerationRequest, CompletionRequest

CURSOR_MARKER = "<CURSOR>"
CURRENT_FUNCTION_LABEL = "Current function:"
IMPORTS_LABEL = "Imports:"
AVAILABLE_IMPORTS_LABEL = "Available imports:"
PROJECT_TYPE_LABEL = "Project type:"
STYLE_LABEL = "Style preferences:"
CODE_TO_COMPLETE_LABEL = "Code to complete:"
COMPLETE_AT_CURSOR_INSTRUCTION = "Provide the completion for the marked cursor position:"
GENERATE_LABEL = "Generate code for:"


def validate_cursor(request: CompletionRequest) -> None:
    """Raise InvalidRequestError unless ``0 <= cursor <= len(code)``."""
    cursor = request.cursor
    if isinstance(cursor, bool) or not isinstance(cursor, int):
        raise InvalidRequestError(f"cursor must be an integer, got {cursor!r}")
    if cursor < 0 or cursor > len(request.code):
        raise InvalidRequestError(
            f"cursor {cursor} is outside the code (length {len(request.code)})"
        )


class PromptBuilder:
    """Deterministic prompt construction; subclasses override the rule wording."""

    completion_rule = "Return only the completion text without explanations."
    generation_rule = "Return only the code without explanations or markdown formatting."

    def build_completion_prompt(self, request: CompletionRequest) -> str:
        validate_cursor(request)

        parts = [
            f"You are a code completion assistant for {request.language}. "
            "Provide code completions that continue from the cursor position. "
            f"{self.completion_rule}\n\n"
        ]
        parts.extend(self._context_sections(request.context, IMPORTS_LABEL))

        before = request.code[: request.cursor]
        after = request.code[request.cursor :]
        parts.append(f"\n{CODE_TO_COMPLETE_LABEL}\n")
        parts.append(before + CURSOR_MARKER + after)
        parts.append(f"\n\n{COMPLETE_AT_CURSOR_INSTRUCTION}")
        return "".join(parts)

    def build_code_generation_prompt(self, request: CodeGenerationRequest) -> str:
        parts = [
            f"You are a code generation assistant for {request.language}. "
            "Generate code based on the following prompt. "
            f"{self.generation_rule}\n\n"
        ]
        parts.extend(self._context_sections(request.context, AVAILABLE_IMPORTS_LABEL))
        parts.append(f"\n{GENERATE_LABEL}\n")
        parts.append(request.prompt)
        return "".join(parts)

    @staticmethod
    def _context_sections(context: CodeContext, imports_label: str) -> list:
        sections = []
        if context.current_function:
            sections.append(f"{CURRENT_FUNCTION_LABEL} {context.current_function}\n")
        if context.imports:
            sections.append(f"{imports_label}\n")
            sections.extend(f"- {imp}\n" for imp in context.imports)
        if context.project_type:
            sections.append(f"{PROJECT_TYPE_LABEL} {context.project_type}\n")
        if context.style_analysis is not None:
            style = json.dumps(context.style_analysis.to_dict(), sort_keys=True)
            sections.append(f"{STYLE_LABEL} {style}\n")
        return sections


class OpenAIPromptBuilder(PromptBuilder):
    completion_rule = "Return only the completion text without explanations or markdown formatting."
