#!/usr/bin/env python3
"""
Parse class records out of the segmented rules document.

A class record looks like this in the plain-text export:

    Paladin (II) Req: Knight
    Utilities
    Oath
    	- Swear an oath to an ally.
    Passive
    Aura
    	- Allies within 2 spaces gain +1 defense.
    Primary
    Smite
    Deal 3 damage.
    Secondary
    Shield Bash
    Push an enemy 1 space.
    Special
    Lay on Hands
    Heal an ally fully.
    Subclasses
"""

import logging
from typing import Optional, Tuple

from greed_rules.errors import ClassParseError, FormatChangeError
from greed_rules.models import (
    ClassPassive,
    ClassRecord,
    ClassUtility,
    PrimaryAction,
    SecondaryAction,
    SpecialAction,
)
from greed_rules.parse_helpers import (
    LineReader,
    from_roman,
    join_description,
    parse_entries,
    read_action,
    read_action_name,
    read_block,
    starts_with,
)
from greed_rules.parse_requirements import RequirementNode, parse_requirement

logger = logging.getLogger(__name__)

REQUIREMENT_MARKER = 'Req:'
SUBCLASSES_SENTINEL = 'Subclasses'
CLASSES_END_SENTINEL = 'Idea Bank'


def parse_class_header(header: str) -> Tuple[str, Optional[int], Optional[RequirementNode]]:
    """Split a class header into name, level and requirement.

    'Paladin (II) Req: Knight' -> ('Paladin', 2, SuperClass('Knight'))
    """
    name, paren, after = header.partition('(')
    name = name.strip()

    level = None
    if paren:
        level = from_roman(after.split(')', 1)[0].strip())

    requirement = None
    if REQUIREMENT_MARKER in header:
        requirement_text = header.split(REQUIREMENT_MARKER, 1)[1].strip()
        if requirement_text:
            requirement = parse_requirement(requirement_text)

    return name, level, requirement


def extract_class(header: str, reader: LineReader) -> ClassRecord:
    """Consume one class record from reader, starting after its header line.

    Leaves the reader positioned just past the 'Subclasses' line. The last
    class may have none; its special description then ends before an
    'Idea Bank' line, or at the end of the document.
    """
    name, level, requirement = parse_class_header(header)
    logger.debug("Parsing class %s at line %d", name, reader.position)

    # Separator line between the header and the utilities
    if reader.next_line() is None:
        raise FormatChangeError(f"{name}: document ended right after the class header")

    utilities = parse_entries(read_block(reader, 'Passive', name), ClassUtility, ClassParseError, name)
    passives = parse_entries(read_block(reader, 'Primary', name), ClassPassive, ClassParseError, name)
    primary = read_action(reader, PrimaryAction, 'Secondary', ClassParseError, name, 'primary')
    secondary = read_action(reader, SecondaryAction, 'Special', ClassParseError, name, 'secondary')

    special_name = read_action_name(reader, ClassParseError, name, 'special')
    # The last class may have no Subclasses line; Idea Bank is left for the caller
    special_lines = reader.take_before(starts_with((SUBCLASSES_SENTINEL, CLASSES_END_SENTINEL)))
    if reader.peek() is not None and reader.peek().startswith(SUBCLASSES_SENTINEL):
        reader.next_line()
    special = SpecialAction(special_name, join_description(special_lines))

    return ClassRecord(
        name=name,
        utilities=utilities,
        passives=passives,
        primary=primary,
        secondary=secondary,
        special=special,
        level=level,
        requirement=requirement,
    )
