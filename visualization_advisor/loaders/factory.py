"""Factory for creating record loaders by file format."""

import logging
from pathlib import Path
from typing import Dict, Optional, Type

from visualization_advisor.core.constants import DEFAULT_CHUNK_SIZE, FILE_EXTENSION_MAP, SUPPORTED_FILE_FORMATS
from visualization_advisor.core.exceptions import UnsupportedFormatError
from visualization_advisor.loaders.base import DataLoader, Source
from visualization_advisor.loaders.csv_loader import CSVLoader
from visualization_advisor.loaders.json_loader import JSONLoader, JSONLinesLoader

logger = logging.getLogger(__name__)


class LoaderFactory:
    """Create the loader matching a declared or inferred file format."""

    _loaders: Dict[str, Type[DataLoader]] = {
        "csv": CSVLoader,
        "json": JSONLoader,
        "jsonl": JSONLinesLoader,
    }

    @classmethod
    def create_loader(
        cls,
        source: Source,
        file_format: Optional[str] = None,
        file_name: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        **kwargs
    ) -> DataLoader:
        """
        Create a loader for the given source.

        Args:
            source: Raw bytes, a file path, or a binary file object
            file_format: 'csv', 'json' or 'jsonl'; inferred from the file name when None
            file_name: Display name, also used for format inference
            chunk_size: Records per chunk
            **kwargs: Loader-specific options

        Returns:
            DataLoader instance

        Raises:
            UnsupportedFormatError: If the format is unknown or cannot be inferred
        """
        resolved = cls.resolve_format(file_format, file_name or cls.source_name(source))
        loader_class = cls._loaders.get(resolved) if resolved else None
        if loader_class is None:
            raise UnsupportedFormatError(
                str(file_format or resolved or "unknown"),
                SUPPORTED_FILE_FORMATS,
                file_name=file_name
            )

        logger.debug(f"Creating {loader_class.__name__} (chunk_size={chunk_size:,})")
        return loader_class(source, chunk_size=chunk_size, file_name=file_name, **kwargs)

    @staticmethod
    def resolve_format(file_format: Optional[str], file_name: Optional[str] = None) -> Optional[str]:
        """Normalize a declared format, or infer one from the file extension."""
        if file_format:
            normalized = file_format.lower().lstrip('.')
            if normalized in ("tsv", "txt", "text/csv"):
                return "csv"
            if normalized in ("ndjson", "application/x-ndjson"):
                return "jsonl"
            if normalized == "application/json":
                return "json"
            return normalized
        if file_name:
            return FILE_EXTENSION_MAP.get(Path(file_name).suffix.lower())
        return None

    @staticmethod
    def source_name(source: Source) -> Optional[str]:
        """File name carried by a path or file object, if any."""
        if isinstance(source, (str, Path)):
            return str(source)
        name = getattr(source, 'name', None)
        return name if isinstance(name, str) else None
