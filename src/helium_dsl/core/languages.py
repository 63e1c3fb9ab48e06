from pathlib import Path, PurePath
from urllib.parse import urlparse
from urllib.request import url2pathname

from helium_dsl.config import DEFAULT_FILE_EXTENSION, DEFAULT_MODEL_DIR

PRIMITIVE_TYPES = frozenset(
    {
        "int",
        "decimal",
        "bigint",
        "uuid",
        "blob",
        "bool",
        "string",
        "void",
        "date",
        "datetime",
        "json",
        "jsonarray",
    }
)

# Types a variable can be declared with; ``void`` only appears as a return type.
VALUE_TYPES = PRIMITIVE_TYPES - {"void"}

DECLARATION_KEYWORDS = ("unit", "persistent", "object", "enum", "validator")
CONTROL_KEYWORDS = ("if", "else", "for", "foreach", "while", "return", "new", "in", "true", "false", "null")

# Offered as completions, in this order.
KEYWORDS: tuple[str, ...] = (*DECLARATION_KEYWORDS, "if", "else", "for", "foreach", "return")

# Identifiers that never name a type, even though they sit where a type could.
NON_TYPE_WORDS = frozenset(CONTROL_KEYWORDS) | frozenset(DECLARATION_KEYWORDS)


def is_primitive_type(name: str) -> bool:
    return name.lower() in PRIMITIVE_TYPES


def is_dsl_file(path: PurePath, extension: str = DEFAULT_FILE_EXTENSION) -> bool:
    return path.name.endswith(extension)


def is_in_model_directory(path: PurePath, model_dir: str = DEFAULT_MODEL_DIR) -> bool:
    return model_dir in path.parent.parts


def is_model_file(
    path: PurePath,
    extension: str = DEFAULT_FILE_EXTENSION,
    model_dir: str = DEFAULT_MODEL_DIR,
) -> bool:
    return is_dsl_file(path, extension) and is_in_model_directory(path, model_dir)


def uri_to_path(uri: str) -> Path:
    """Convert a ``file://`` URI to a filesystem path; plain paths pass through."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return Path(uri)
    return Path(url2pathname(parsed.path))


def path_to_uri(path: str | Path) -> str:
    return Path(path).resolve().as_uri()
