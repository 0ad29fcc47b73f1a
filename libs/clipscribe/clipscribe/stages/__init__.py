"""Processing stages."""

from clipscribe.stages.base import Stage
from clipscribe.stages.media_derivation import MediaDerivationStage
from clipscribe.stages.persistence import PersistenceStage
from clipscribe.stages.transcription import TranscriptionStage

__all__ = [
    "MediaDerivationStage",
    "PersistenceStage",
    "Stage",
    "TranscriptionStage",
]
