"""
Runtime configuration read from the environment (optionally a .env file).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv


DEFAULT_DATA_DIR = "./data"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class RuntimeConfig:
    data_dir: Path
    log_level: str
    api_host: str
    api_port: int


def load_env(dotenv_path: Optional[Union[str, Path]] = None) -> None:
    """Load variables from a .env file without overriding the real environment."""
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def runtime_config() -> RuntimeConfig:
    data_dir = Path(os.getenv("ROSTER_DATA_DIR", DEFAULT_DATA_DIR)).expanduser().resolve()
    log_level = os.getenv("ROSTER_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    api_host = os.getenv("ROSTER_API_HOST", DEFAULT_API_HOST).strip() or DEFAULT_API_HOST

    raw_port = os.getenv("ROSTER_API_PORT", "").strip()
    try:
        api_port = int(raw_port) if raw_port else DEFAULT_API_PORT
    except ValueError as exc:
        raise ValueError(f"ROSTER_API_PORT must be an integer, got '{raw_port}'") from exc

    return RuntimeConfig(
        data_dir=data_dir,
        log_level=log_level,
        api_host=api_host,
        api_port=api_port,
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Attach a stream handler to the root logger at the given level."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
