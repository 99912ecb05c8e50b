"""
Configuration management using Pydantic Settings
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py is at: backend/sitetags/core/config.py
# Project root is: backend/sitetags/core/../../../
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)

# Largest value an unsigned 256-bit counter can hold
UINT256_MAX = 2 ** 256 - 1


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "sitetags"
    app_env: str = Field(default="development", description="Application environment")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:8000",
        description="Allowed CORS origins (comma-separated)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_uvicorn_access: bool = Field(default=False, description="Enable Uvicorn access logging")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"sitetags.registry": "DEBUG"})'
    )
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/sitetags.log",
        description="Path to log file (relative to project root)"
    )
    log_file_rotation: str = Field(
        default="midnight",
        description="Log file rotation: 'midnight' or weekly 'W0'..'W6'"
    )
    log_file_retention: int = Field(
        default=30,
        ge=1,
        description="Number of rotated log files to keep"
    )

    # Endorsement weighting
    max_weight: int = Field(
        default=UINT256_MAX,
        ge=0,
        description="Upper bound of a voting counter; exceeding it is an overflow"
    )
    payment_sink: str = Field(
        default="burn",
        description="Payment sink: 'burn' (in-process) or 'http' (external ledger)"
    )
    payment_sink_url: Optional[str] = Field(
        default=None,
        description="Ledger endpoint receiving burned payments when payment_sink='http'"
    )
    payment_sink_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Timeout for a single burn request to the ledger"
    )
    cost_signal: str = Field(
        default="static",
        description="Cost signal: 'static' (constant figure) or 'elapsed' (allowance minus time spent)"
    )
    cost_signal_static_value: int = Field(
        default=0,
        ge=0,
        description="Remaining budget reported by the static cost signal"
    )
    cost_signal_budget_us: int = Field(
        default=100_000,
        ge=0,
        description="Per-endorsement allowance in microseconds for the elapsed cost signal"
    )

    # Features
    enable_metrics: bool = Field(default=True, description="Expose Prometheus metrics")

    @field_validator("payment_sink", "cost_signal", "log_format", mode="before")
    @classmethod
    def normalize_choice(cls, v):
        """Lower-case enum-like string options"""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("payment_sink")
    @classmethod
    def check_payment_sink(cls, v: str) -> str:
        if v not in ("burn", "http"):
            raise ValueError(f"unknown payment sink: {v}")
        return v

    @field_validator("cost_signal")
    @classmethod
    def check_cost_signal(cls, v: str) -> str:
        if v not in ("static", "elapsed"):
            raise ValueError(f"unknown cost signal: {v}")
        return v

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def module_levels(self) -> Dict[str, str]:
        """Parse module-specific log levels, ignoring malformed JSON"""
        if not self.log_module_levels:
            return {}
        try:
            levels = json.loads(self.log_module_levels)
        except (json.JSONDecodeError, TypeError):
            return {}
        return levels if isinstance(levels, dict) else {}

    @property
    def log_file_location(self) -> Path:
        """Resolve log file path relative to project root"""
        log_path = Path(self.log_file_path)
        if not log_path.is_absolute():
            log_path = _project_root / log_path
        return log_path

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        env_prefix="SITETAGS_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
