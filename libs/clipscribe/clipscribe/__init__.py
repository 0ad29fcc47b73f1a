"""ClipScribe: upload-processing pipeline for recorded video clips."""

__version__ = "0.1.0"
