"""Shared enums and building blocks of the CodeMaker wire API."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model for CodeMaker API payloads (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """Serialize to a JSON-ready dict using wire field names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Mode(str, Enum):
    """Processing mode requested from the service."""

    CODE = "code"
    INLINE_CODE = "inline_code"
    EDIT_CODE = "edit_code"
    DOCUMENT = "document"
    FIX_SYNTAX = "fix_syntax"

    @property
    def supports_extended_context(self) -> bool:
        return self in (Mode.CODE, Mode.EDIT_CODE, Mode.INLINE_CODE)


class Modify(str, Enum):
    """How existing code at the target location is altered."""

    NONE = "none"
    REPLACE = "replace"
    INSERT = "insert"


class Language(str, Enum):
    """Programming language of a source file."""

    C = "c"
    CPP = "cpp"
    CSHARP = "csharp"
    DART = "dart"
    GO = "go"
    JAVA = "java"
    JAVASCRIPT = "javascript"
    KOTLIN = "kotlin"
    PHP = "php"
    PYTHON = "python"
    RUBY = "ruby"
    RUST = "rust"
    SCALA = "scala"
    SWIFT = "swift"
    TYPESCRIPT = "typescript"


class LanguageCode(str, Enum):
    """Natural language used for generated documentation and chat."""

    EN = "en"
    ES = "es"
    PT = "pt"
    JA = "ja"
    VI = "vi"
    TR = "tr"
    KO = "ko"
    DE = "de"
    FR = "fr"
    PL = "pl"
    ZH = "zh"


class Visibility(str, Enum):
    """Which members documentation is generated for."""

    ALL = "all"
    PUBLIC = "public"


class Vote(str, Enum):
    """Assistant feedback vote."""

    UP = "up"
    DOWN = "down"


class Input(WireModel):
    """Source code sent to the service."""

    source: str


class Output(WireModel):
    """Source code returned by the service."""

    source: str = ""


class Options(WireModel):
    """Per-request generation options."""

    modify: Modify | None = None
    code_path: str | None = None
    prompt: str | None = None
    detect_syntax_errors: bool = False
    allow_multi_line_autocomplete: bool = False
    context_id: str | None = None
    model: str | None = None
    override_indent: int | None = None
    minimal_lines_length: int | None = None
    visibility: Visibility | None = None
    language: LanguageCode | None = None


__all__ = [
    "WireModel",
    "Mode",
    "Modify",
    "Language",
    "LanguageCode",
    "Visibility",
    "Vote",
    "Input",
    "Output",
    "Options",
]
