from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    return float(value) if value else None


@dataclass
class Settings:

    # Upstream model credential (server side only)
    openai_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))

    # Upstream model call; off by default so the endpoint serves the mock result
    upstream_enabled: bool = field(default_factory=lambda: _env_bool("HEALTHSCAN_UPSTREAM_ENABLED"))
    upstream_url: str = field(default_factory=lambda: os.getenv(
        "HEALTHSCAN_UPSTREAM_URL", "https://api.openai.com/v1/responses"))
    upstream_model: str = field(default_factory=lambda: os.getenv("HEALTHSCAN_UPSTREAM_MODEL", "gpt-4.1-mini"))
    upstream_timeout: Optional[float] = field(default_factory=lambda: _env_float("HEALTHSCAN_UPSTREAM_TIMEOUT"))

    # Server
    api_host: str = field(default_factory=lambda: os.getenv("HEALTHSCAN_API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: int(os.getenv("HEALTHSCAN_API_PORT", "5001")))
    max_image_bytes: int = 400_000  # ~400 KB decoded payload budget

    # Client
    endpoint: str = field(default_factory=lambda: os.getenv(
        "HEALTHSCAN_ENDPOINT", "http://localhost:5001/api/analyze"))
    remote_interval: float = 2.5  # s between remote attempts (plus backoff)
    remote_timeout: Optional[float] = field(default_factory=lambda: _env_float("HEALTHSCAN_REMOTE_TIMEOUT"))
    tick_interval_ms: int = 400
    camera_index: int = field(default_factory=lambda: int(os.getenv("HEALTHSCAN_CAMERA_INDEX", "0")))
    snapshot_dir: Path = field(default_factory=lambda: Path(os.getenv("HEALTHSCAN_SNAPSHOT_DIR", "snapshots")))

    log_level: str = field(default_factory=lambda: os.getenv("HEALTHSCAN_LOG_LEVEL", "INFO"))


settings = Settings()
