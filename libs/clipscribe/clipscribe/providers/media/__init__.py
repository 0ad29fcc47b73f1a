from clipscribe.providers.media.base import MediaProvider
from clipscribe.providers.media.ffmpeg import FFmpegMediaProvider

__all__ = ["FFmpegMediaProvider", "MediaProvider"]
