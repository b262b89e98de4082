from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from rbac_script_generator.credentials import DEFAULT_STORAGE_KEY
from rbac_script_generator.llm.gemini_client import DEFAULT_MODEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    model: str = DEFAULT_MODEL
    storage_path: str = "~/.rbac_script_generator/local_storage.json"
    storage_key: str = DEFAULT_STORAGE_KEY  # slot name inside the storage file
    log_level: str = "INFO"


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """
    Build Settings from the environment (.env is loaded first when reading os.environ).
    Empty variables fall back to the defaults.
    """
    if environ is None:
        load_dotenv()  # Load .env file if present
        environ = dict(os.environ)

    defaults = Settings()
    return Settings(
        model=environ.get("RBAC_GEN_MODEL") or defaults.model,
        storage_path=environ.get("RBAC_GEN_STORAGE_PATH") or defaults.storage_path,
        storage_key=environ.get("RBAC_GEN_STORAGE_KEY") or defaults.storage_key,
        log_level=(environ.get("RBAC_GEN_LOG_LEVEL") or defaults.log_level).upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
