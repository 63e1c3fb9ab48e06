"""Runtime settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_PACKAGE_ROOT = Path(__file__).parent

DEFAULT_FILE_EXTENSION = ".mez"
DEFAULT_MODEL_DIR = "model"

_RULES_RELATIVE = Path("generated") / "rules" / "dsl-rules.json"
_BIFS_RELATIVE = Path("generated") / "bifs" / "bif-metadata.json"
_PARSER_RELATIVE = Path("generated") / "parser"


def _resolve_artifact(env_var: str, relative: Path) -> Path:
    """Return the env override, else the packaged artifact, else the working-directory one."""
    override = os.getenv(env_var)
    if override:
        return Path(override)
    bundled = _PACKAGE_ROOT / relative
    if bundled.exists():
        return bundled
    return Path.cwd() / relative


@dataclass(frozen=True)
class Settings:
    rules_path: Path
    bif_metadata_path: Path
    parser_dir: Path
    file_extension: str = DEFAULT_FILE_EXTENSION
    model_dir: str = DEFAULT_MODEL_DIR


def load_settings() -> Settings:
    return Settings(
        rules_path=_resolve_artifact("HELIUM_RULES_PATH", _RULES_RELATIVE),
        bif_metadata_path=_resolve_artifact("HELIUM_BIF_METADATA_PATH", _BIFS_RELATIVE),
        parser_dir=_resolve_artifact("HELIUM_PARSER_DIR", _PARSER_RELATIVE),
        file_extension=os.getenv("HELIUM_FILE_EXTENSION", DEFAULT_FILE_EXTENSION),
        model_dir=os.getenv("HELIUM_MODEL_DIR", DEFAULT_MODEL_DIR),
    )
