#!/usr/bin/env python3
"""
Errors raised while ingesting the rules document.

Every ingestion error is fatal for the attempt as a whole: callers keep the
previously cached catalog and report the error once.
"""


class IngestError(Exception):
    """Base class for rules ingestion failures."""


class TransportError(IngestError):
    """The raw document text or its metadata could not be fetched."""


class FormatChangeError(IngestError):
    """A sentinel the parser depends on is missing or out of order."""


class ClassParseError(IngestError):
    """A required line is missing inside a class record."""


class OriginParseError(IngestError):
    """A required line is missing inside an origin record."""


class CacheLoadError(Exception):
    """A persisted class cache could not be read back."""
