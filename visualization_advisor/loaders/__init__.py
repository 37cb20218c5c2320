"""Chunked record loaders for delimited text, JSON and JSON Lines."""

from visualization_advisor.loaders.base import DataLoader, RecordChunk
from visualization_advisor.loaders.csv_loader import CSVLoader
from visualization_advisor.loaders.factory import LoaderFactory
from visualization_advisor.loaders.json_loader import JSONLinesLoader, JSONLoader

__all__ = ['DataLoader', 'RecordChunk', 'CSVLoader', 'JSONLoader', 'JSONLinesLoader', 'LoaderFactory']
