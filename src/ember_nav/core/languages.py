from pathlib import Path
from typing import Literal

DocumentKind = Literal["template", "script"]
ScriptDialect = Literal["javascript", "typescript"]

_EXTENSION_KIND_MAP: dict[str, DocumentKind] = {
    ".hbs": "template",
    ".handlebars": "template",
    ".js": "script",
    ".mjs": "script",
    ".ts": "script",
}

_EXTENSION_DIALECT_MAP: dict[str, ScriptDialect] = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".ts": "typescript",
}

_DIALECT_ALIASES: dict[str, ScriptDialect] = {
    "javascript": "javascript",
    "js": "javascript",
    "typescript": "typescript",
    "ts": "typescript",
}


class UnsupportedDocumentError(ValueError):
    pass


def document_kind(file_path: Path) -> DocumentKind:
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_KIND_MAP:
        return _EXTENSION_KIND_MAP[suffix]
    raise UnsupportedDocumentError(f"Unsupported file extension: {suffix}")


def script_dialect(file_path: Path) -> ScriptDialect:
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_DIALECT_MAP:
        return _EXTENSION_DIALECT_MAP[suffix]
    raise UnsupportedDocumentError(f"Not a script file: {file_path}")


def normalize_dialect(dialect: str) -> ScriptDialect:
    normalized = dialect.strip().lower()
    if normalized not in _DIALECT_ALIASES:
        raise UnsupportedDocumentError(f"Unsupported dialect '{dialect}'. Supported: {sorted(set(_DIALECT_ALIASES.values()))}")
    return _DIALECT_ALIASES[normalized]
