#!/usr/bin/env python3
"""
Parse origin records out of the segmented rules document.

Origins share the class layout but end at the first blank line after the
special action, and carry neither a level nor a requirement.
"""

import logging

from greed_rules.errors import FormatChangeError, OriginParseError
from greed_rules.models import (
    ClassPassive,
    ClassUtility,
    OriginRecord,
    PrimaryAction,
    SecondaryAction,
    SpecialAction,
)
from greed_rules.parse_helpers import (
    LineReader,
    is_blank,
    join_description,
    parse_entries,
    read_action,
    read_action_name,
    read_block,
)

logger = logging.getLogger(__name__)

HUMAN_ORIGIN = 'Human'


def human_origin() -> OriginRecord:
    """Humans have no origin abilities at all."""
    return OriginRecord(HUMAN_ORIGIN)


def origin_name(header: str) -> str:
    words = header.split()
    return words[0] if words else ''


def extract_origin(header: str, reader: LineReader) -> OriginRecord:
    """Consume one origin record from reader, starting after its header line.

    The Human origin is returned as is and consumes nothing; the caller has
    to skip past its text to the next origin.
    """
    name = origin_name(header)
    if name == HUMAN_ORIGIN:
        return human_origin()
    if not name:
        raise OriginParseError("Origin header is blank")

    logger.debug("Parsing origin %s at line %d", name, reader.position)

    # Separator line between the header and the utilities
    if reader.next_line() is None:
        raise FormatChangeError(f"{name}: document ended right after the origin header")

    utilities = parse_entries(read_block(reader, 'Passive', name), ClassUtility, OriginParseError, name)
    passives = parse_entries(read_block(reader, 'Primary', name), ClassPassive, OriginParseError, name)
    primary = read_action(reader, PrimaryAction, 'Secondary', OriginParseError, name, 'primary')
    secondary = read_action(reader, SecondaryAction, 'Special', OriginParseError, name, 'secondary')

    special_name = read_action_name(reader, OriginParseError, name, 'special')
    special_lines, _ = reader.take_until(is_blank)
    special = SpecialAction(special_name, join_description(special_lines))

    return OriginRecord(
        name=name,
        utilities=utilities,
        passives=passives,
        primary=primary,
        secondary=secondary,
        special=special,
    )
