"""Record sources for the initial task list."""

from .file_source import FileRecordSource, bundled_records_path
from .http_source import HttpRecordSource

__all__ = ["FileRecordSource", "HttpRecordSource", "bundled_records_path"]
