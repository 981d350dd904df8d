"""Completion and code-generation request/response models."""

from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass
class IndentationStyle:
    type: str = ""          # "spaces", "tabs", "mixed"
    size: int = 0
    confidence: float = 0.0


@dataclass
class NamingConventions:
    variables: str = ""     # "camelCase", "snake_case", "PascalCase", "mixed"
    functions: str = ""
    classes: str = ""
    constants: str = ""     # "UPPER_CASE", "camelCase", "PascalCase", "mixed"
    interfaces: str = ""    # "PascalCase", "IPascalCase", "mixed"
    types: str = ""
    confidence: float = 0.0


@dataclass
class LintingConfig:
    has_eslint: bool = False
    has_prettier: bool = False
    eslint_rules: dict = field(default_factory=dict)
    prettier_config: dict = field(default_factory=dict)
    config_files: list = field(default_factory=list)    # list[str]


@dataclass
class TypeScriptInfo:
    is_typescript_project: bool = False
    has_strict_mode: bool = False
    uses_type_annotations: bool = False
    compiler_options: dict = field(default_factory=dict)
    config_file: str = ""


@dataclass
class StyleAnalysis:
    """Editor-side style detection results; passed through to prompts untouched."""

    indentation: IndentationStyle = field(default_factory=IndentationStyle)
    naming: NamingConventions = field(default_factory=NamingConventions)
    linting: LintingConfig = field(default_factory=LintingConfig)
    typescript: TypeScriptInfo = field(default_factory=TypeScriptInfo)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CodeContext:
    current_function: str = ""
    imports: list = field(default_factory=list)          # list[str], order preserved
    project_type: str = ""
    recent_changes: list = field(default_factory=list)   # list[str]
    style_analysis: Optional[StyleAnalysis] = None


@dataclass
class CompletionRequest:
    code: str
    cursor: int             # 0 <= cursor <= len(code)
    language: str
    context: CodeContext = field(default_factory=CodeContext)


@dataclass
class CompletionResponse:
    suggestions: list = field(default_factory=list)      # list[str]
    confidence: float = 0.0
    error: str = ""

    @classmethod
    def failed(cls, error: str) -> "CompletionResponse":
        return cls(suggestions=[], confidence=0.0, error=error)


@dataclass
class CodeGenerationRequest:
    prompt: str
    language: str
    context: CodeContext = field(default_factory=CodeContext)


@dataclass
class CodeGenerationResponse:
    code: str = ""
    error: str = ""

    @classmethod
    def failed(cls, error: str) -> "CodeGenerationResponse":
        return cls(code="", error=error)
