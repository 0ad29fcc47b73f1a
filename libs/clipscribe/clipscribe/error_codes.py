"""Canonical error kinds surfaced to API clients."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"

    VALIDATION_ERROR = "VALIDATION_ERROR"
    DERIVATION_ERROR = "DERIVATION_ERROR"
    TRANSCRIPTION_ERROR = "TRANSCRIPTION_ERROR"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    NOT_FOUND = "NOT_FOUND"

    RATE_LIMITED = "RATE_LIMITED"
