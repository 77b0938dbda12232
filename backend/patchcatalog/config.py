import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_PATH = Path.home() / ".patchcatalog" / "patches.db"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def db_path(override: Optional[str] = None) -> Path:
    if override:
        return Path(override)
    env = os.getenv("PATCHCATALOG_DB_PATH")
    if env:
        return Path(env)
    return DEFAULT_DB_PATH


def log_level() -> str:
    return os.getenv("PATCHCATALOG_LOG_LEVEL", "INFO").upper()


def cors_origins() -> List[str]:
    return os.environ.get('CORS_ORIGINS', '*').split(',')


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or log_level(),
        format=LOG_FORMAT
    )
