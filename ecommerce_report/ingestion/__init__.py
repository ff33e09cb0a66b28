"""
Data Ingestion Module
"""
from .loader import (
    SOURCE_COLUMNS,
    DatasetLoader,
    Datasets,
    FileFormat,
    LoadError,
    SourceName,
    source_file_stems,
)

__all__ = [
    "SOURCE_COLUMNS",
    "DatasetLoader",
    "Datasets",
    "FileFormat",
    "LoadError",
    "SourceName",
    "source_file_stems",
]
