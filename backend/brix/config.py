import os
from dataclasses import dataclass
from typing import List, Optional
import pathlib
import yaml


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str]
    openai_model: str
    openai_base_url: Optional[str]
    openai_max_tokens: int
    cors_allow_origins: List[str]
    heartbeat_interval: float
    retry_attempts: int
    retry_base_delay: float
    retry_max_delay: float
    debug: bool
    prompts: dict


def load_settings() -> Settings:
    cors_env = os.getenv("CORS_ALLOW_ORIGINS", "*")
    cors = [o.strip() for o in cors_env.split(",") if o.strip()] or ["*"]
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        openai_max_tokens=_env_int("OPENAI_MAX_TOKENS", 8000),
        cors_allow_origins=cors,
        heartbeat_interval=_env_float("SSE_HEARTBEAT_SECONDS", 30.0),
        retry_attempts=max(1, _env_int("MODEL_RETRY_ATTEMPTS", 3)),
        retry_base_delay=_env_float("MODEL_RETRY_BASE_DELAY", 1.0),
        retry_max_delay=_env_float("MODEL_RETRY_MAX_DELAY", 5.0),
        debug=env_flag("BRIX_DEBUG"),
        prompts=_load_prompts(),
    )


def env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def _load_prompts() -> dict:
    # Bundled next to this module; PROMPTS_PATH points at an override
    prompts_path = pathlib.Path(
        os.getenv("PROMPTS_PATH") or pathlib.Path(__file__).resolve().parent / "prompts.yml"
    )
    try:
        with open(prompts_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return data


# Default system prompts preserved for fallback
DEFAULT_SYSTEM_PROMPT = (
    "You are a senior web designer and front-end developer. "
    "Follow output format instructions exactly."
)

DEFAULT_CHAT_PROMPT = (
    "You are Brix.AI, a friendly and professional assistant that specializes in website creation. "
    "Provide helpful, clear and concise answers about website development, design, or the Brix.AI platform. "
    "If asked about website creation, explain that complete websites can be generated from simple text prompts. "
    "If asked about templates, mention landing pages, business sites and portfolios."
)
