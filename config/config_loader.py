"""Load settings.yaml into typed dataclasses. Applies environment overrides."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

API_URL_ENV = "HOTTAKE_API_URL"
DATA_DIR_ENV = "HOTTAKE_DATA_DIR"


@dataclass
class ApiConfig:
    base_url: str = "http://localhost:3000/api"
    timeout_sec: float = 10.0


@dataclass
class StorageConfig:
    data_dir: Path = Path("~/.hottake")
    profile_key: str = "hottake_user_profile"


@dataclass
class UiConfig:
    title_max_len: int = 25


@dataclass
class AppConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    ui: UiConfig = field(default_factory=UiConfig)


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load configuration from settings.yaml.

    Missing sections fall back to the dataclass defaults. HOTTAKE_API_URL and
    HOTTAKE_DATA_DIR in the environment win over the file.

    Raises FileNotFoundError if settings file missing.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    api_raw = raw.get("api", {})
    api = ApiConfig(
        base_url=str(api_raw.get("base_url", ApiConfig.base_url)).rstrip("/"),
        timeout_sec=float(api_raw.get("timeout_sec", ApiConfig.timeout_sec)),
    )

    storage_raw = raw.get("storage", {})
    storage = StorageConfig(
        data_dir=Path(storage_raw.get("data_dir", StorageConfig.data_dir)),
        profile_key=str(storage_raw.get("profile_key", StorageConfig.profile_key)),
    )

    ui_raw = raw.get("ui", {})
    ui = UiConfig(title_max_len=int(ui_raw.get("title_max_len", UiConfig.title_max_len)))

    api_url = os.environ.get(API_URL_ENV, "").strip()
    if api_url:
        logger.info("API base URL overridden by %s", API_URL_ENV)
        api.base_url = api_url.rstrip("/")

    data_dir = os.environ.get(DATA_DIR_ENV, "").strip()
    if data_dir:
        logger.info("Data directory overridden by %s", DATA_DIR_ENV)
        storage.data_dir = Path(data_dir)

    storage.data_dir = storage.data_dir.expanduser()

    return AppConfig(api=api, storage=storage, ui=ui)
