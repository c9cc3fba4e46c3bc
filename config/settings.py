"""
Runtime and deployment configuration for the asset sync service.

Reads from environment variables with sensible defaults.
Freshservice credentials, install parameters, and deployment knobs live here.

For domain constants (page size, history limit, job name), see config.constants.
For secrets and API keys, see .env.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from shared.utils.config import load_yaml
from shared.utils.env import env_float, env_int, env_value

load_dotenv()

ROOT_DIR = Path(__file__).resolve().parents[1]


# =============================================================================
# FRESHSERVICE CONNECTION
# =============================================================================

# Tenant subdomain, e.g. "acme" for https://acme.freshservice.com
FRESHSERVICE_DOMAIN: str | None = env_value("FRESHSERVICE_DOMAIN")
FRESHSERVICE_API_KEY: str | None = env_value("FRESHSERVICE_API_KEY")

# Per-call timeout; a timed out page or update counts as a transport failure
REQUEST_TIMEOUT_SECONDS: float = env_float("ASSET_SYNC_REQUEST_TIMEOUT_SECONDS", 30.0)


# =============================================================================
# RUN TUNING
# =============================================================================

# Bounded worker pool for per-asset updates (1 = strictly sequential)
MAX_WORKERS: int = max(1, env_int("ASSET_SYNC_MAX_WORKERS", 1))

# SQLite file holding lastSyncTime and recentActivity
DB_PATH: Path = Path(env_value("ASSET_SYNC_DB_PATH", "./data/asset_sync.db") or "./data/asset_sync.db")
if not DB_PATH.is_absolute():
    DB_PATH = ROOT_DIR / DB_PATH

# Optional YAML file with install parameters; env vars win over the file
CONFIG_PATH: str | None = env_value("ASSET_SYNC_CONFIG_PATH")


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL: str = env_value("ASSET_SYNC_LOG_LEVEL", "INFO") or "INFO"


# =============================================================================
# INSTALL PARAMETERS
# =============================================================================

_ENV_PARAM_NAMES: dict[str, str] = {
    "domain": "FRESHSERVICE_DOMAIN",
    "api_key": "FRESHSERVICE_API_KEY",
    "auto_detect_dell": "AUTO_DETECT_DELL",
    "dell_asset_type_ids": "DELL_ASSET_TYPE_IDS",
    "sync_schedule": "SYNC_SCHEDULE_HOURS",
}


def install_params(config_path: str | None = None) -> dict[str, Any]:
    """Return the install parameters the sync job runs with.

    Values from the YAML file (``install_params:`` section, or the whole
    document) are overlaid by the matching environment variables.
    """
    document = load_yaml(config_path or CONFIG_PATH)
    section = document.get("install_params", document)
    params: dict[str, Any] = dict(section) if isinstance(section, dict) else {}
    for param, env_name in _ENV_PARAM_NAMES.items():
        value = env_value(env_name)
        if value is not None:
            params[param] = value
    return params
