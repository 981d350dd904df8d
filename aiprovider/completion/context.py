"""Derive a CodeContext (imports, enclosing function, project type) from source text.

Editors that cannot supply context themselves can run the open buffer through
``ContextProcessor.process_context`` before building a completion request.
Everything here is regex based; nothing is parsed.
"""

import logging
import re
from dataclasses import replace

from ..models.requests import CodeContext

logger = logging.getLogger(__name__)

MAX_IMPORTS = 20
LIMITED_IMPORTS = 10
LIMITED_RECENT_CHANGES = 5
LIMITED_FUNCTION_CHARS = 100
CHARS_PER_TOKEN = 4

_JS_FAMILY = ("typescript", "javascript", "tsx", "jsx")

_IMPORT_PATTERNS = {
    "javascript": re.compile(
        r"import\s+.*?\s+from\s+['\"][^'\"]+['\"]"
        r"|import\s+['\"][^'\"]+['\"]"
        r"|const\s+.*?\s*=\s*require\(['\"][^'\"]+['\"]\)"
    ),
    "python": re.compile(
        r"^[ \t]*from\s+[\w.]+\s+import\s+.*$"
        r"|^[ \t]*import\s+[\w.]+(?:\s*,\s*[\w.]+)*",
        re.MULTILINE,
    ),
    "go": re.compile(r"import\s+(?:\w+\s+)?\"[^\"]+\""),
    "java": re.compile(r"import\s+(?:static\s+)?[\w.]+(?:\.\*)?;"),
    "csharp": re.compile(r"using\s+[\w.]+;"),
}

# Go grouped imports: import ( "fmt"; alias "net/http" )
_GO_IMPORT_BLOCK = re.compile(r"import\s*\(([^)]*)\)")
_GO_IMPORT_SPEC = re.compile(r"(?:\w+\s+)?\"[^\"]+\"")

_FUNCTION_PATTERNS = {
    "javascript": [
        re.compile(r"function\s+(\w+)\s*\([^)]*\)"),
        re.compile(r"(\w+)\s*:\s*\([^)]*\)\s*=>\s*{"),
        re.compile(r"(\w+)\s*=\s*\([^)]*\)\s*=>\s*{"),
        re.compile(r"(\w+)\s*\([^)]*\)\s*{"),
    ],
    "python": [
        re.compile(r"def\s+(\w+)\s*\([^)]*\).*:"),
    ],
    "go": [
        re.compile(r"func\s+(\w+)\s*\([^)]*\)"),
        re.compile(r"func\s+\(\w+\s+\*?\w+\)\s+(\w+)\s*\([^)]*\)"),
    ],
    "java": [
        re.compile(r"(?:public|private|protected)?\s*(?:static)?\s*\w+\s+(\w+)\s*\([^)]*\)"),
    ],
    "csharp": [
        re.compile(
            r"(?:public|private|protected|internal)?\s*(?:static)?\s*(?:async)?\s*\w+\s+(\w+)\s*\([^)]*\)"
        ),
    ],
}

_BLOCK_BOUNDARIES = {
    "javascript": re.compile(r"^(?:export\s+)?(?:class|interface)\s+\w+"),
    "python": re.compile(r"^class\s+\w+"),
    "go": re.compile(r"^type\s+\w+\s+(?:struct|interface)"),
    "java": re.compile(r"^(?:public|private|protected)?\s*(?:class|interface)\s+\w+"),
}

# Names the loose "name(...) {" patterns pick up from control statements.
_NOT_FUNCTION_NAMES = frozenset({
    "if", "for", "while", "switch", "catch", "return", "new", "else", "do", "function",
})

_PROJECT_MARKERS = {
    "typescript": [
        (("import React", "from 'react'"), "React"),
        (("@angular", "import { Component }"), "Angular"),
        (("import Vue", "from 'vue'"), "Vue"),
        (("import express", "from 'express'"), "Node.js/Express"),
    ],
    "javascript": [
        (("import React", "require('react')"), "React"),
        (("require('express')", "import express"), "Node.js/Express"),
    ],
    "python": [
        (("from django", "import django"), "Django"),
        (("from flask", "import flask"), "Flask"),
        (("import fastapi", "from fastapi"), "FastAPI"),
    ],
    "go": [
        (("github.com/gin-gonic/gin",), "Gin"),
        (("net/http",), "Go HTTP"),
    ],
    "java": [
        (("@SpringBootApplication", "org.springframework"), "Spring Boot"),
        (("javax.servlet",), "Java Servlet"),
    ],
    "csharp": [
        (("using Microsoft.AspNetCore",), "ASP.NET Core"),
        (("using System.Web",), "ASP.NET"),
    ],
}

_LANGUAGE_NAMES = {
    "typescript": "TypeScript",
    "javascript": "JavaScript",
    "python": "Python",
    "go": "Go",
    "java": "Java",
    "csharp": "C#",
}


def _family(language: str) -> str:
    """Map a language label onto the key used by the pattern tables."""
    lang = language.strip().lower()
    if lang in ("typescript", "tsx"):
        return "typescript"
    if lang in ("javascript", "jsx"):
        return "javascript"
    if lang in ("c#", "csharp"):
        return "csharp"
    return lang


def _cursor_line(lines: list, cursor: int) -> int:
    position = 0
    for index, line in enumerate(lines):
        if position + len(line) + 1 > cursor:
            return index
        position += len(line) + 1
    return len(lines) - 1


class ContextProcessor:
    """Extracts code context for completion requests."""

    def process_context(self, code: str, cursor: int, language: str) -> CodeContext:
        logger.info("Processing context for language: %s, cursor: %d", language, cursor)

        context = CodeContext(
            current_function=self.extract_current_function(code, cursor, language),
            imports=self.extract_imports(code, language),
            project_type=self.detect_project_type(code, language),
            recent_changes=[],
        )

        logger.info(
            "Context processed: %d imports, project type: %s",
            len(context.imports), context.project_type,
        )
        return context

    def extract_imports(self, code: str, language: str) -> list:
        """Import statements in source order, de-duplicated and capped at MAX_IMPORTS."""
        family = _family(language)
        pattern_key = "javascript" if family in _JS_FAMILY else family
        pattern = _IMPORT_PATTERNS.get(pattern_key)
        if pattern is None:
            logger.warning("Unknown language for import extraction: %s", language)
            return []

        found = [match.group(0).strip() for match in pattern.finditer(code)]
        if family == "go":
            for block in _GO_IMPORT_BLOCK.finditer(code):
                found.extend(
                    f"import {spec.group(0).strip()}"
                    for spec in _GO_IMPORT_SPEC.finditer(block.group(1))
                )

        imports = list(dict.fromkeys(item for item in found if item))
        if len(imports) > MAX_IMPORTS:
            logger.warning("Truncating imports from %d to %d", len(imports), MAX_IMPORTS)
            imports = imports[:MAX_IMPORTS]
        return imports

    def extract_current_function(self, code: str, cursor: int, language: str) -> str:
        """Name of the function enclosing *cursor*, or ``""``.

        Scans upwards from the cursor line and gives up at the first class,
        interface or struct declaration.
        """
        if cursor < 0 or cursor > len(code):
            return ""

        family = _family(language)
        key = "javascript" if family in _JS_FAMILY else family
        patterns = _FUNCTION_PATTERNS.get(key)
        if not patterns:
            return ""
        boundary = _BLOCK_BOUNDARIES.get(key)

        lines = code.split("\n")
        for index in range(_cursor_line(lines, cursor), -1, -1):
            line = lines[index].strip()
            for pattern in patterns:
                match = pattern.search(line)
                if match and match.group(1) not in _NOT_FUNCTION_NAMES:
                    logger.debug("Found current function: %s", match.group(1))
                    return match.group(1)
            if boundary is not None and boundary.match(line):
                break
        return ""

    def detect_project_type(self, code: str, language: str) -> str:
        family = _family(language)
        for markers, project_type in _PROJECT_MARKERS.get(family, []):
            if any(marker in code for marker in markers):
                return project_type
        return _LANGUAGE_NAMES.get(family, language)

    def limit_context_size(self, context: CodeContext, max_tokens: int) -> CodeContext:
        """Return a copy of *context* trimmed to roughly ``max_tokens`` tokens.

        Imports go first, then recent changes, then the function name is cut.
        """
        max_chars = max_tokens * CHARS_PER_TOKEN
        limited = replace(
            context,
            imports=list(context.imports),
            recent_changes=list(context.recent_changes),
        )
        size = self._estimate_size(limited)
        if size <= max_chars:
            return limited

        logger.warning("Context size %d exceeds limit %d, truncating", size, max_chars)

        if len(limited.imports) > LIMITED_IMPORTS:
            limited.imports = limited.imports[:LIMITED_IMPORTS]
            size = self._estimate_size(limited)

        if size > max_chars and len(limited.recent_changes) > LIMITED_RECENT_CHANGES:
            limited.recent_changes = limited.recent_changes[:LIMITED_RECENT_CHANGES]
            size = self._estimate_size(limited)

        if size > max_chars and len(limited.current_function) > LIMITED_FUNCTION_CHARS:
            limited.current_function = limited.current_function[:LIMITED_FUNCTION_CHARS] + "..."

        return limited

    def extract_surrounding_code(
        self, code: str, cursor: int, lines_before: int, lines_after: int
    ) -> str:
        """The cursor line plus up to *lines_before*/*lines_after* neighbours."""
        if cursor < 0 or cursor > len(code):
            return ""

        lines = code.split("\n")
        current = _cursor_line(lines, cursor)
        start = max(0, current - lines_before)
        end = min(len(lines) - 1, current + lines_after)
        return "\n".join(lines[start : end + 1])

    @staticmethod
    def _estimate_size(context: CodeContext) -> int:
        return (
            len(context.current_function)
            + len(context.project_type)
            + sum(len(item) for item in context.imports)
            + sum(len(item) for item in context.recent_changes)
        )
