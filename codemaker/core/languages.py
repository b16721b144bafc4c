"""File extension to language lookup."""

from pathlib import Path

from codemaker.models.api.common import Language

EXTENSIONS: dict[str, Language] = {
    "c": Language.C,
    "h": Language.C,
    "cc": Language.CPP,
    "cpp": Language.CPP,
    "cxx": Language.CPP,
    "hh": Language.CPP,
    "hpp": Language.CPP,
    "cs": Language.CSHARP,
    "dart": Language.DART,
    "go": Language.GO,
    "java": Language.JAVA,
    "js": Language.JAVASCRIPT,
    "jsx": Language.JAVASCRIPT,
    "mjs": Language.JAVASCRIPT,
    "cjs": Language.JAVASCRIPT,
    "kt": Language.KOTLIN,
    "kts": Language.KOTLIN,
    "php": Language.PHP,
    "py": Language.PYTHON,
    "rb": Language.RUBY,
    "rs": Language.RUST,
    "scala": Language.SCALA,
    "swift": Language.SWIFT,
    "ts": Language.TYPESCRIPT,
    "tsx": Language.TYPESCRIPT,
}


class UnsupportedLanguageError(ValueError):
    """Raised when a file extension does not map to a supported language."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Unsupported file type: {self.path.name}")


def _extension(path: Path | str) -> str:
    return Path(path).suffix.lstrip(".").lower()


def is_supported(path: Path | str) -> bool:
    """Check whether a file's extension maps to a supported language."""
    return _extension(path) in EXTENSIONS


def language_from_extension(path: Path | str) -> Language:
    """Resolve the language of a file from its extension.

    Raises:
        UnsupportedLanguageError: if the extension is unknown
    """
    try:
        return EXTENSIONS[_extension(path)]
    except KeyError:
        raise UnsupportedLanguageError(path) from None
