#!/usr/bin/env python3
"""
Turn the exported rules document into the ordered line stream the record
extractors work on.

Two inputs are supported:
- the plain-text export, split on its line breaks;
- the structured paragraph form of the document (Docs API JSON), where
  bullet nesting is still known and is rendered back as tab-indented
  "- " prefixes so the indentation test in the extractors keeps working.
"""

import logging
from typing import Any, Dict, List

from greed_rules.errors import FormatChangeError

logger = logging.getLogger(__name__)

CONTENT_START_SENTINEL = 'Origins'


def render_bullet(text: str, depth: int) -> str:
    """Render a bulleted paragraph at the given nesting depth."""
    return '\t' * depth + '- ' + text


def paragraph_text(paragraph: Dict[str, Any]) -> str:
    """Join the text runs of one paragraph, without its trailing newline."""
    runs = []
    for element in paragraph.get('elements', []):
        text_run = element.get('textRun')
        if text_run and text_run.get('content'):
            runs.append(text_run['content'])
    return ''.join(runs).rstrip('\n')


def paragraphs_to_text(document: Dict[str, Any]) -> str:
    """Flatten a structured document into plain text, keeping bullet depth.

    Structural elements that are not paragraphs (tables, section breaks)
    carry no rules text and are skipped.
    """
    lines = []
    for element in document.get('body', {}).get('content', []):
        paragraph = element.get('paragraph')
        if paragraph is None:
            continue
        text = paragraph_text(paragraph)
        bullet = paragraph.get('bullet')
        if bullet is not None:
            text = render_bullet(text, bullet.get('nestingLevel', 0))
        lines.append(text)
    return '\n'.join(lines)


def segment(raw_text: str) -> List[str]:
    """Split the export into lines and drop everything before the origins.

    Every line up to and including the first one starting with 'Origins'
    is preamble; the rest is returned in document order.
    """
    lines = raw_text.splitlines()

    for index, line in enumerate(lines):
        if line.startswith(CONTENT_START_SENTINEL):
            logger.debug("Content starts after line %d of %d", index, len(lines))
            return lines[index + 1:]

    logger.error("No line starting with %r in the document", CONTENT_START_SENTINEL)
    raise FormatChangeError(f"No line starting with {CONTENT_START_SENTINEL!r} in the document")


def segment_document(document: Dict[str, Any]) -> List[str]:
    return segment(paragraphs_to_text(document))
