import getpass
import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DB_PATH = "data/jobs.db"
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"


def load_env() -> None:
    """Load .env from project root if present."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


def db_path() -> Path:
    return Path(os.getenv("JOBBOARD_DB", DEFAULT_DB_PATH))


def log_dir() -> Path:
    return Path(os.getenv("JOBBOARD_LOG_DIR", DEFAULT_LOG_DIR))


def log_level() -> str:
    return os.getenv("JOBBOARD_LOG_LEVEL", DEFAULT_LOG_LEVEL)


def caller_identity() -> str:
    """Caller identity from JOBBOARD_CALLER, else the OS user name."""
    return os.getenv("JOBBOARD_CALLER") or getpass.getuser()
