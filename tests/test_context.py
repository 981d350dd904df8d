"""Tests for ContextProcessor."""

import pytest

from aiprovider.completion.context import MAX_IMPORTS, ContextProcessor
from aiprovider.models.requests import CodeContext

PYTHON_SOURCE = """import os
import sys, json
from flask import Flask, request

app = Flask(__name__)


class Handler:
    def handle(self, payload):
        data = json.loads(payload)
        return data
"""

GO_SOURCE = """package main

import (
    "fmt"
    log "github.com/sirupsen/logrus"
)

import "net/http"

func (s *Server) ServeHTTP(w http.ResponseWriter, r *http.Request) {
    fmt.Fprintln(w, "ok")
}
"""

TS_SOURCE = """import React from 'react';
import { useState } from 'react';
const lodash = require('lodash');

export function Counter(props) {
    if (props.start) {
        return null;
    }
}
"""


@pytest.fixture
def processor() -> ContextProcessor:
    return ContextProcessor()


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------


class TestExtractImports:
    def test_python_in_source_order(self, processor):
        assert processor.extract_imports(PYTHON_SOURCE, "python") == [
            "import os",
            "import sys, json",
            "from flask import Flask, request",
        ]

    def test_go_single_and_grouped(self, processor):
        imports = processor.extract_imports(GO_SOURCE, "go")
        assert 'import "net/http"' in imports
        assert 'import "fmt"' in imports
        assert 'import log "github.com/sirupsen/logrus"' in imports

    def test_typescript(self, processor):
        imports = processor.extract_imports(TS_SOURCE, "typescript")
        assert imports == [
            "import React from 'react'",
            "import { useState } from 'react'",
            "const lodash = require('lodash')",
        ]

    def test_java_and_csharp(self, processor):
        assert processor.extract_imports("import java.util.List;\nimport static a.B.*;", "java") == [
            "import java.util.List;",
            "import static a.B.*;",
        ]
        assert processor.extract_imports("using System.Text;", "c#") == ["using System.Text;"]

    def test_duplicates_removed(self, processor):
        assert processor.extract_imports("import os\nimport os\n", "python") == ["import os"]

    def test_capped(self, processor):
        code = "\n".join(f"import mod{i}" for i in range(MAX_IMPORTS + 5))
        assert len(processor.extract_imports(code, "python")) == MAX_IMPORTS

    def test_unknown_language(self, processor):
        assert processor.extract_imports("use std::io;", "rust") == []


# ---------------------------------------------------------------------------
# Current function
# ---------------------------------------------------------------------------


class TestExtractCurrentFunction:
    def test_python_method(self, processor):
        cursor = PYTHON_SOURCE.index("return data")
        assert processor.extract_current_function(PYTHON_SOURCE, cursor, "python") == "handle"

    def test_go_method_receiver(self, processor):
        cursor = GO_SOURCE.index("fmt.Fprintln")
        assert processor.extract_current_function(GO_SOURCE, cursor, "go") == "ServeHTTP"

    def test_control_keywords_skipped(self, processor):
        cursor = TS_SOURCE.index("return null")
        assert processor.extract_current_function(TS_SOURCE, cursor, "tsx") == "Counter"

    def test_cursor_at_end_of_code(self, processor):
        code = "def tail():\n    pass"
        assert processor.extract_current_function(code, len(code), "python") == "tail"

    def test_stops_at_class_boundary(self, processor):
        cursor = PYTHON_SOURCE.index("class Handler") + len("class Handler")
        assert processor.extract_current_function(PYTHON_SOURCE, cursor, "python") == ""

    def test_out_of_range_cursor(self, processor):
        assert processor.extract_current_function("def f(): pass", 99, "python") == ""

    def test_unknown_language(self, processor):
        assert processor.extract_current_function("fn main() {}", 3, "rust") == ""


# ---------------------------------------------------------------------------
# Project type
# ---------------------------------------------------------------------------


class TestDetectProjectType:
    def test_framework_detected(self, processor):
        assert processor.detect_project_type(PYTHON_SOURCE, "python") == "Flask"
        assert processor.detect_project_type(TS_SOURCE, "typescript") == "React"
        assert processor.detect_project_type(GO_SOURCE, "go") == "Go HTTP"

    def test_falls_back_to_language_name(self, processor):
        assert processor.detect_project_type("x = 1", "python") == "Python"
        assert processor.detect_project_type("int x;", "csharp") == "C#"

    def test_unknown_language_passed_through(self, processor):
        assert processor.detect_project_type("fn main() {}", "rust") == "rust"


# ---------------------------------------------------------------------------
# Full context / limits
# ---------------------------------------------------------------------------


class TestProcessContext:
    def test_builds_context(self, processor):
        cursor = PYTHON_SOURCE.index("return data")
        context = processor.process_context(PYTHON_SOURCE, cursor, "python")
        assert context.current_function == "handle"
        assert context.project_type == "Flask"
        assert len(context.imports) == 3
        assert context.recent_changes == []
        assert context.style_analysis is None


class TestLimitContextSize:
    def test_small_context_unchanged(self, processor):
        context = CodeContext(current_function="f", imports=["import os"], project_type="Python")
        limited = processor.limit_context_size(context, max_tokens=100)
        assert limited == context
        assert limited is not context

    def test_imports_trimmed_first(self, processor):
        context = CodeContext(imports=[f"import module_{i}" for i in range(20)], recent_changes=["a"] * 8)
        limited = processor.limit_context_size(context, max_tokens=10)
        assert len(limited.imports) == 10
        assert len(limited.recent_changes) == 5

    def test_original_not_mutated(self, processor):
        context = CodeContext(imports=[f"import module_{i}" for i in range(20)])
        processor.limit_context_size(context, max_tokens=1)
        assert len(context.imports) == 20

    def test_long_function_name_truncated(self, processor):
        context = CodeContext(current_function="f" * 300)
        limited = processor.limit_context_size(context, max_tokens=10)
        assert limited.current_function == "f" * 100 + "..."


class TestExtractSurroundingCode:
    def test_window(self, processor):
        code = "a\nb\nc\nd\ne"
        cursor = code.index("c")
        assert processor.extract_surrounding_code(code, cursor, 1, 1) == "b\nc\nd"

    def test_clamped_to_code(self, processor):
        code = "a\nb"
        assert processor.extract_surrounding_code(code, 0, 5, 5) == "a\nb"

    def test_out_of_range(self, processor):
        assert processor.extract_surrounding_code("abc", 10, 1, 1) == ""
