from __future__ import annotations


class NewsReaderError(Exception):
    """Base class for errors raised by newsreader."""


class FetchError(NewsReaderError):
    """The fetch service could not be reached or returned an error."""


class SummarizeError(NewsReaderError):
    """The summarization call failed."""


class ExtractionError(NewsReaderError):
    """No article text could be extracted from a page."""


class DownloadError(ExtractionError):
    """The target page could not be downloaded."""


class StorageError(NewsReaderError):
    """A snapshot could not be written to local storage."""
