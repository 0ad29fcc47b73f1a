"""Provider factory and registry."""

from __future__ import annotations

from typing import Any
from collections.abc import Mapping

from clipscribe.exceptions import ConfigurationError
from clipscribe.providers.media.base import MediaProvider
from clipscribe.providers.transcription.base import TranscriptionProvider


def get_transcription_provider(config: Mapping[str, Any]) -> TranscriptionProvider:
    """Get transcription provider based on configuration."""
    provider_type = str(config.get("provider", "openai")).strip().lower()

    match provider_type:
        case "openai" | "openai_compat" | "whisper":
            from clipscribe.providers.transcription.openai_compat import (
                OpenAITranscriptionProvider,
            )

            base_url = str(config.get("base_url") or "").strip()
            if not base_url:
                raise ConfigurationError("transcription provider requires base_url")
            return OpenAITranscriptionProvider(
                base_url=base_url,
                api_key=str(config.get("api_key") or ""),
                model=str(config.get("model") or "whisper-1"),
                timeout=float(config.get("timeout", 300.0)),
            )
        case _:
            raise ConfigurationError(f"Unknown transcription provider: {provider_type}")


def get_media_provider(config: Mapping[str, Any]) -> MediaProvider:
    provider_type = str(config.get("provider", "ffmpeg")).strip().lower()

    match provider_type:
        case "ffmpeg" | "default":
            from clipscribe.providers.media.ffmpeg import FFmpegMediaProvider

            timeout = config.get("tool_timeout_s")
            return FFmpegMediaProvider(
                ffmpeg_bin=str(config.get("ffmpeg_bin") or "ffmpeg"),
                ffprobe_bin=str(config.get("ffprobe_bin") or "ffprobe"),
                audio_bitrate=str(config.get("audio_bitrate") or "64k"),
                timeout_s=float(timeout) if timeout is not None else None,
            )
        case _:
            raise ConfigurationError(f"Unknown media provider: {provider_type}")
