import os
from dataclasses import dataclass
from typing import Dict, Optional

from .logging import get_logger

log = get_logger("config")

DEFAULT_PRODUCT_SOURCE_URL = "https://e153e320-4faa-4d1b-acbb-3196e5a4ecd6.mock.pstmn.io/products"
DEFAULT_MICROLINK_API_URL = "https://api.microlink.io"
DEFAULT_HTTP_TIMEOUT = 15
DEFAULT_ENRICH_WORKERS = 4


@dataclass
class Settings:
    product_source_url: str
    microlink_api_url: str
    http_timeout: int
    enrich_workers: int


def _find_upwards(start_dir: str, filename: str) -> Optional[str]:
    """Return first matching file found when walking up from start_dir.

    Running the server from a subdirectory (e.g. `src/`) still picks up the
    repository-level `.env`.
    """
    d = os.path.abspath(start_dir or ".")
    while True:
        candidate = os.path.join(d, filename)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(d)
        if parent == d:
            return None
        d = parent


def _read_dotenv(dotenv_dir: str) -> Dict[str, str]:
    """Minimal .env reader.

    - Reads key=value pairs, ignores comments (#/;) and blank lines.
    - Trims single/double quotes around the value.
    - Returns mapping; does not mutate environment.
    """
    env: Dict[str, str] = {}
    path = _find_upwards(dotenv_dir, ".env")
    if not path:
        log.debug(f"No .env found starting from: {os.path.abspath(dotenv_dir)}")
        return env
    try:
        with open(path, "r", encoding="utf-8") as f:
            for raw in f:
                line = raw.strip()
                if not line or line.startswith("#") or line.startswith(";"):
                    continue
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip()
                if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
                    v = v[1:-1]
                env[k] = v.strip()
        log.debug(f"Loaded {len(env)} key(s) from .env at {path}")
    except OSError as e:
        log.warning(f"Failed reading .env: {e}")
    return env


def _lookup(key: str, env: Dict[str, str]) -> Optional[str]:
    v = os.environ.get(key)
    if v and v.strip():
        return v.strip()
    v = env.get(key)
    return v.strip() if v and v.strip() else None


def _positive_int(key: str, raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning(f"{key}={raw!r} is not an integer; using {default}")
        return default
    if value < 1:
        log.warning(f"{key}={value} must be >= 1; using {default}")
        return default
    return value


def load_settings(dotenv_dir: Optional[str] = None) -> Settings:
    """Resolve all settings from env first, then `.env`, then defaults."""
    env = _read_dotenv(dotenv_dir or os.getcwd())
    settings = Settings(
        product_source_url=_lookup("PRODUCT_SOURCE_URL", env) or DEFAULT_PRODUCT_SOURCE_URL,
        microlink_api_url=_lookup("MICROLINK_API_URL", env) or DEFAULT_MICROLINK_API_URL,
        http_timeout=_positive_int("HTTP_TIMEOUT", _lookup("HTTP_TIMEOUT", env), DEFAULT_HTTP_TIMEOUT),
        enrich_workers=_positive_int("ENRICH_WORKERS", _lookup("ENRICH_WORKERS", env), DEFAULT_ENRICH_WORKERS),
    )
    log.info(f"Product source URL : {settings.product_source_url}")
    log.info(f"Metadata API URL   : {settings.microlink_api_url}")
    log.info(f"HTTP timeout       : {settings.http_timeout}s")
    log.info(f"Enrichment workers : {settings.enrich_workers}")
    return settings
