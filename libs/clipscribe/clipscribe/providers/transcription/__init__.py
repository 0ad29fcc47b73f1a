from clipscribe.providers.transcription.base import TranscriptionProvider
from clipscribe.providers.transcription.openai_compat import OpenAITranscriptionProvider

__all__ = ["OpenAITranscriptionProvider", "TranscriptionProvider"]
