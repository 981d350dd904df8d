#!/usr/bin/env python3
"""aiprovider demo: one completion and one code generation against the configured backend.

Usage
-----
Copy `.env.example` to `.env`, fill in your credentials, then run:

    python main.py

Environment variables (see .env.example for full list):
  AI_PROVIDER          claude | openai      (default: claude)
  CLAUDE_API_KEY       Required if AI_PROVIDER=claude (ANTHROPIC_API_KEY also works)
  CLAUDE_API_ENDPOINT  Base URL override    (default: https://api.anthropic.com)
  CLAUDE_MODEL         Model name override  (default: provider default)
  OPENAI_API_KEY       Required if AI_PROVIDER=openai
  OPENAI_API_ENDPOINT  Base URL override    (default: https://api.openai.com/v1)
  OPENAI_MODEL         Model name override  (default: provider default)
  AI_MAX_TOKENS        Response token limit (default: 1000)
  AI_TEMPERATURE       Sampling temperature (default: 0.7)
"""

import logging
import sys

from aiprovider.completion.context import ContextProcessor
from aiprovider.config import Config
from aiprovider.errors import APIError, ConfigurationError, TransportError
from aiprovider.models.requests import CodeGenerationRequest, CompletionRequest
from aiprovider.providers import AIProvider, create_client

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)

SAMPLE_CODE = '''import os
from pathlib import Path


def read_config(path):
    text = Path(path).read_text()
    '''


def run_demo(client: AIProvider) -> None:
    """Exercise the templated call, one completion and one generation."""
    body = client.call_with_prompt_and_variables(
        "Hello {{name}}, reply with one word describing {{language}}.",
        '{"name": "Alice", "language": "Go"}',
    )
    logger.info("Raw templated reply: %d bytes", len(body))

    processor = ContextProcessor()
    cursor = len(SAMPLE_CODE)
    context = processor.limit_context_size(
        processor.process_context(SAMPLE_CODE, cursor, "python"), max_tokens=500
    )

    completion = client.generate_completion(
        CompletionRequest(code=SAMPLE_CODE, cursor=cursor, language="python", context=context)
    )
    if completion.error:
        logger.error("Completion failed: %s", completion.error)
    else:
        logger.info("Completion (confidence %.2f):", completion.confidence)
        for suggestion in completion.suggestions:
            print(f"  {suggestion}")

    generated = client.generate_code(
        CodeGenerationRequest(
            prompt="a function that returns the n-th Fibonacci number",
            language="python",
        )
    )
    if generated.error:
        logger.error("Code generation failed: %s", generated.error)
    else:
        print(generated.code)


def main() -> None:
    try:
        config = Config.from_env()
        client = create_client(config.to_ai_config())
    except ConfigurationError as exc:
        logger.error("%s. Copy .env.example to .env and fill in your API key.", exc)
        sys.exit(1)

    logger.info("AI provider: %s / model: %s", client.name, client.model_name)

    try:
        client.validate_credentials()
        run_demo(client)
    except (APIError, TransportError) as exc:
        logger.error("%s request failed: %s", client.name, exc)
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
