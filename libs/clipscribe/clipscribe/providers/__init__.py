"""Provider abstractions for external tools and services."""

from clipscribe.providers.registry import get_media_provider, get_transcription_provider

__all__ = ["get_media_provider", "get_transcription_provider"]
