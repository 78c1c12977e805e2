"""Environment-driven settings and debug logging for the catalog server and listing page."""

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

from green_globe_catalog.models import DEFAULT_MAX_PRICE, DEFAULT_PAGE_SIZE

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOG_FILE_NAME = "green_globe_catalog_debug.log"

logger = logging.getLogger(__name__)

_DEBUG_LOGGING_SETUP = False


class Settings(BaseModel):
    """Runtime settings read from the environment (see .env)."""

    supabase_url: str = Field("", description="Supabase project URL.")
    supabase_anon_key: str = Field("", description="Supabase anon (public) key.")
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, description="Listings per page.")
    max_price: float = Field(DEFAULT_MAX_PRICE, ge=0, description="Price slider ceiling and default max price.")


def setup_debug_logging(log_dir: Path) -> None:
    """Attach a file handler to the package logger so output survives Streamlit capturing stderr."""
    global _DEBUG_LOGGING_SETUP
    if _DEBUG_LOGGING_SETUP:
        return
    _DEBUG_LOGGING_SETUP = True
    handler = logging.FileHandler(log_dir / LOG_FILE_NAME, mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    pkg_logger = logging.getLogger("green_globe_catalog")
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG)


def load_env_file(path: Path) -> None:
    """Load KEY=VALUE lines from path into os.environ if not already set."""
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            key, _, value = line.partition("=")
            key = key.strip()
            if key and key not in os.environ:
                os.environ[key] = value.strip().strip('"').strip("'")


def _env_number(name: str, default: float, cast: type) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default
    if value < (1 if cast is int else 0):
        logger.warning("Ignoring out-of-range %s=%r; using %s", name, raw, default)
        return default
    return value


def get_settings() -> Settings:
    """Build Settings from os.environ. Call load_env_file first to pick up .env."""
    return Settings(
        supabase_url=os.environ.get("SUPABASE_URL", "").strip(),
        supabase_anon_key=os.environ.get("SUPABASE_ANON_KEY", "").strip(),
        page_size=_env_number("CATALOG_PAGE_SIZE", DEFAULT_PAGE_SIZE, int),
        max_price=_env_number("CATALOG_MAX_PRICE", DEFAULT_MAX_PRICE, float),
    )


def ensure_env_loaded() -> Settings:
    """Load the project .env, set up debug logging, and return settings."""
    load_env_file(PROJECT_ROOT / ".env")
    setup_debug_logging(PROJECT_ROOT)
    return get_settings()
