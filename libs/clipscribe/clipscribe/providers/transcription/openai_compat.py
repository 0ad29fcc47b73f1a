"""OpenAI-compatible transcription provider (Whisper API)."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from clipscribe.exceptions import ProviderError
from clipscribe.providers.transcription.base import TranscriptionProvider

logger = logging.getLogger(__name__)

_AUDIO_CONTENT_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".webm": "audio/webm",
}


class OpenAITranscriptionProvider(TranscriptionProvider):
    """`POST {base_url}/audio/transcriptions` with the audio file as multipart.

    Works against api.openai.com (`whisper-1`) and any server exposing the same
    endpoint (e.g. vLLM, faster-whisper-server).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        model: str = "whisper-1",
        timeout: float = 300.0,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the provider.

        Args:
            base_url: API base URL (e.g., https://api.openai.com/v1)
            api_key: Bearer token; omitted from headers when empty
            model: Model name
            timeout: Request timeout in seconds
            client: Pre-built client (tests inject one with a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            )
        return self._client

    async def transcribe(self, audio_path: str, language: str | None = None) -> str:
        client = await self._get_client()
        headers: dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        path = Path(audio_path)
        content_type = _AUDIO_CONTENT_TYPES.get(path.suffix.lower(), "application/octet-stream")
        data = {"model": self.model, "response_format": "json"}
        if language:
            data["language"] = language

        with path.open("rb") as f:
            files = {"file": (path.name, f, content_type)}
            try:
                response = await client.post(
                    f"{self.base_url}/audio/transcriptions",
                    headers=headers,
                    files=files,
                    data=data,
                )
                response.raise_for_status()
                result = response.json()
            except httpx.HTTPStatusError as exc:
                raise ProviderError(
                    "openai",
                    f"HTTP {exc.response.status_code}: {exc.response.text[:500]}",
                ) from exc
            except httpx.HTTPError as exc:
                raise ProviderError("openai", str(exc) or type(exc).__name__) from exc
            except ValueError as exc:
                raise ProviderError("openai", f"invalid JSON response: {exc}") from exc

        if not isinstance(result, dict) or not isinstance(result.get("text"), str):
            raise ProviderError("openai", "response has no `text` field")
        text = result["text"].strip()
        logger.debug("transcribed %s (%d chars)", path.name, len(text))
        return text

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "OpenAITranscriptionProvider":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
