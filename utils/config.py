"""Environment-driven configuration for the navigation server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    """Runtime settings for the server and its AI collaborators.

    Attributes:
        openai_api_key: API key for the OpenAI client (None disables startup checks in tests).
        vision_model: Model used for scene analysis.
        text_model: Model used for audio classification and instruction generation.
        transcribe_model: Speech-to-text model.
        max_upload_bytes: Upper bound for image and audio uploads.
        max_image_dimension: Longest edge an image is scaled down to before analysis.
        default_audio_level: Audio level stored when the client sends none.
        recent_context_limit: Number of recent records used as instruction context.
        enforce_single_active: Deactivate older sessions when a new one starts.
        broadcast_queue_size: Pending messages allowed per realtime client.
        log_level: Root logging level name.
    """

    openai_api_key: Optional[str] = None
    vision_model: str = "gpt-4o"
    text_model: str = "gpt-4o"
    transcribe_model: str = "whisper-1"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    max_image_dimension: int = 1024
    default_audio_level: int = 50
    recent_context_limit: int = 10
    enforce_single_active: bool = True
    broadcast_queue_size: int = 100
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build a config from environment variables (defaults for anything unset)."""
        env = os.environ if env is None else env
        return cls(
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            vision_model=env.get("NAV_VISION_MODEL", cls.vision_model),
            text_model=env.get("NAV_TEXT_MODEL", cls.text_model),
            transcribe_model=env.get("NAV_TRANSCRIBE_MODEL", cls.transcribe_model),
            max_upload_bytes=_env_int(env, "NAV_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            max_image_dimension=_env_int(env, "NAV_MAX_IMAGE_DIMENSION", cls.max_image_dimension),
            default_audio_level=_env_int(env, "NAV_DEFAULT_AUDIO_LEVEL", cls.default_audio_level),
            recent_context_limit=_env_int(env, "NAV_RECENT_CONTEXT_LIMIT", cls.recent_context_limit),
            enforce_single_active=_env_bool(env, "NAV_ENFORCE_SINGLE_ACTIVE", cls.enforce_single_active),
            broadcast_queue_size=_env_int(env, "NAV_BROADCAST_QUEUE_SIZE", cls.broadcast_queue_size),
            log_level=env.get("LOG_LEVEL", cls.log_level).upper(),
        )
