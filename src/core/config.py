"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets the workflows and the adapters (automation/AI/HTTP) read one contract.

The two API keys keep their well-known names (`SCREENGRASP_API_KEY`,
`OPENAI_API_KEY`); everything else uses the `SMOOTH_EXAMPLES_` prefix.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ERP_DOWNLOAD_URL = (
    "https://www.dropbox.com/scl/fi/4qc9w57zrmmisyqu3ojnp/mini-erp-mock.exe"
    "?rlkey=x5m3ob810zt1scf0mpfn15l4v&dl=1"
)


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "smooth-operator-examples"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "smooth-operator-examples"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "smooth-operator-examples"
    return Path.home() / ".config" / "smooth-operator-examples"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Write/update variables in the user's global .env file."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v})

    lines = ["# smooth-operator-examples user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Typed and validated at the edge (env vars / .env) so the workflows only
    see clean values.
    """

    model_config = SettingsConfigDict(
        env_prefix="SMOOTH_EXAMPLES_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Project .env first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    screengrasp_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SCREENGRASP_API_KEY", "SMOOTH_EXAMPLES_SCREENGRASP_API_KEY"),
        description="ScreenGrasp key required by the automation server.",
    )
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "SMOOTH_EXAMPLES_OPENAI_API_KEY"),
        description="Optional key for the chat-completion API.",
    )
    openai_base_url: str | None = Field(
        default=None,
        description="OpenAI-compatible base URL (None = api.openai.com).",
    )
    openai_model: str = Field(
        default="gpt-4o",
        min_length=1,
        description="Vision-capable chat model used by every example.",
    )
    ai_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for chat-completion calls (seconds).",
    )
    ai_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries performed by the OpenAI SDK on transient failures.",
    )

    server_url: str | None = Field(
        default=None,
        description="Connect to an already running automation server instead of starting one.",
    )
    delay_scale: float = Field(
        default=1.0,
        ge=0,
        description="Multiplier for every fixed wait between UI actions.",
    )

    http_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Timeout for the mock ERP download (seconds).",
    )
    user_agent: str = Field(
        default="smooth-operator-examples/0.1",
        min_length=1,
        description="User-Agent for outbound downloads.",
    )

    erp_download_url: str = Field(
        default=DEFAULT_ERP_DOWNLOAD_URL,
        min_length=8,
        description="Where the mock ERP executable is downloaded from.",
    )
    erp_file_name: str = Field(
        default="mini-erp-mock.exe",
        min_length=1,
    )
    download_dir: Path | None = Field(
        default=None,
        description="Directory for the mock ERP download (None = system temp dir).",
    )
    erp_window_title: str = Field(
        default="ERP system",
        min_length=1,
        description="Title of the mock ERP main window.",
    )

    order_mail_subject: str = Field(
        default="New Computerstuff.com Order",
        min_length=1,
        description="Subject searched for in the mailbox.",
    )
    twitter_accounts: list[str] = Field(
        default_factory=lambda: ["kimmonismus", "ai_for_success", "slow_developer"],
        description="Accounts read by the AI news checker.",
    )
