#!/usr/bin/env python3
"""
Where the rules document comes from.

A document source supplies two values: the plain-text export and the
document's last-modified time. Network sources (the hosted rules document)
live with the application; this module ships the local-file source used by
the command line and the tests.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from greed_rules.errors import TransportError

logger = logging.getLogger(__name__)


class DocumentSource:
    """Interface for anything that can provide the rules document."""

    def fetch_last_modified(self) -> Optional[datetime]:
        raise NotImplementedError

    def fetch_text(self) -> str:
        raise NotImplementedError


class LocalDocumentSource(DocumentSource):
    """A plain-text export saved on disk; its mtime is the last-modified time."""

    def __init__(self, path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f'LocalDocumentSource({str(self.path)!r})'

    def fetch_last_modified(self) -> datetime:
        try:
            mtime = self.path.stat().st_mtime
        except OSError as e:
            raise TransportError(f"Cannot stat {self.path}: {e}") from e
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    def fetch_text(self) -> str:
        logger.info("Reading rules export from %s", self.path)
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise TransportError(f"Cannot read {self.path}: {e}") from e
