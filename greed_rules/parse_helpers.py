#!/usr/bin/env python3
"""Shared parsing helpers for the Greed rules parsers.

Provides:
- from_roman(token) / to_roman(value)
- LineReader, the cursor shared by consecutive record extractions
- is_continuation(line) / strip_bullet(line)
- parse_entries(lines, entry_cls, error_cls, record_name)
- read_block(reader, sentinel, record_name)
- read_action(reader, action_cls, sentinel, error_cls, record_name, section)
"""
import logging
from typing import Callable, List, Optional, Sequence, Tuple, Type, Union

from greed_rules.errors import FormatChangeError

logger = logging.getLogger(__name__)

ROMAN_NUMERALS = {
    'I': 1,
    'II': 2,
    'III': 3,
    'IV': 4,
    'V': 5,
}

BULLET_MARKERS = ('\t', '-')

# Section sentinels in the order they appear inside a record
SECTION_SENTINELS = ('Passive', 'Primary', 'Secondary', 'Special', 'Subclasses')


def from_roman(token: str) -> Optional[int]:
    """Decode a class level numeral.

    Only the literals I to V are known; the rules document never goes past
    level V, so anything else (including lowercase) is None.
    """
    return ROMAN_NUMERALS.get(token)


def to_roman(value: int) -> str:
    """Render a level back to the numeral used in the document."""
    for numeral, number in ROMAN_NUMERALS.items():
        if number == value:
            return numeral
    return str(value)


class LineReader:
    """Cursor over the segmented lines of the rules document.

    Extractors consume lines from a shared reader and leave it positioned
    right after their own record, so the next extraction picks up there.
    """

    def __init__(self, lines: Sequence[str], position: int = 0):
        self._lines = list(lines)
        self._start = position
        self._position = position

    def __repr__(self) -> str:
        return f'LineReader(position={self._position}, total={len(self._lines)})'

    @property
    def position(self) -> int:
        return self._position

    @property
    def consumed(self) -> int:
        """Number of lines consumed since this reader was created."""
        return self._position - self._start

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._lines)

    def copy(self) -> 'LineReader':
        """Independent reader over a copy of the lines, at the same position."""
        return LineReader(self._lines, self._position)

    def peek(self) -> Optional[str]:
        if self.exhausted:
            return None
        return self._lines[self._position]

    def next_line(self) -> Optional[str]:
        """Consume and return the next line, or None at the end of the stream."""
        line = self.peek()
        if line is not None:
            self._position += 1
        return line

    def take_until(self, predicate: Callable[[str], bool]) -> Tuple[List[str], Optional[str]]:
        """Consume lines up to and including the first one matching predicate.

        Returns the lines before the match and the matching line, which is
        consumed too; the second value is None if the stream ran out first.
        """
        taken = []
        while not self.exhausted:
            line = self.next_line()
            if predicate(line):
                return taken, line
            taken.append(line)
        return taken, None

    def take_before(self, predicate: Callable[[str], bool]) -> List[str]:
        """Consume lines up to, but not including, the first one matching predicate."""
        taken = []
        while not self.exhausted and not predicate(self.peek()):
            taken.append(self.next_line())
        return taken

    def skip_to(self, predicate: Callable[[str], bool]) -> Optional[str]:
        """Consume lines until one matches predicate and return it (consumed)."""
        while not self.exhausted:
            line = self.next_line()
            if predicate(line):
                return line
        return None


def is_continuation(line: str) -> bool:
    """True if the line is indented or bulleted under the previous entry."""
    return line.startswith(BULLET_MARKERS)


def strip_bullet(line: str) -> str:
    """Remove leading tabs and a '- ' bullet marker from a line."""
    text = line.lstrip('\t')
    if text.startswith('-'):
        text = text[1:]
    return text.strip()


def parse_entries(lines, entry_cls, error_cls: Type[Exception], record_name: str) -> list:
    """Pair entry names with their indented, possibly multi-line descriptions.

    A line that is not indented or bulleted names a new entry; continuation
    lines are appended to the description of the latest entry.
    """
    entries = []
    name = None
    description: List[str] = []

    for line in lines:
        if not line.strip():
            continue
        if is_continuation(line):
            if name is None:
                raise error_cls(f"{record_name}: description line {line.strip()!r} has no entry name")
            description.append(strip_bullet(line))
            continue
        if name is not None:
            entries.append(entry_cls(name, '\n'.join(description)))
        name = line.strip()
        description = []

    if name is not None:
        entries.append(entry_cls(name, '\n'.join(description)))
    return entries


def starts_with(prefix: Union[str, Tuple[str, ...]]) -> Callable[[str], bool]:
    return lambda line: line.startswith(prefix)


def is_blank(line: str) -> bool:
    return not line.strip()


def read_block(reader: LineReader, sentinel: str, record_name: str) -> List[str]:
    """Consume a block terminated by a line starting with sentinel.

    The sentinel is how the parser knows the document still has the expected
    layout. Reaching the end of the document, or a later section's heading
    line, first means the document revision is incompatible. Entry names and
    description lines that merely begin with a later heading's word are
    ordinary block content.
    """
    later = SECTION_SENTINELS[SECTION_SENTINELS.index(sentinel) + 1:]
    block, terminator = reader.take_until(
        lambda line: line.startswith(sentinel) or line.strip() in later)
    if terminator is None:
        logger.error("%s: no line starting with %r before end of document", record_name, sentinel)
        raise FormatChangeError(f"{record_name}: expected a line starting with {sentinel!r}")
    if not terminator.startswith(sentinel):
        logger.error("%s: found %r where %r was expected", record_name, terminator, sentinel)
        raise FormatChangeError(f"{record_name}: found {terminator.strip()!r} before {sentinel!r}")
    return block


def join_description(lines: List[str]) -> str:
    return '\n'.join(line.rstrip() for line in lines).strip('\n').rstrip()


def read_action_name(reader: LineReader, error_cls: Type[Exception], record_name: str, section: str) -> str:
    name = reader.next_line()
    if name is None or not name.strip():
        logger.error("%s: missing %s action name", record_name, section)
        raise error_cls(f"{record_name}: missing {section} action name")
    return name.rstrip()


def read_action(reader: LineReader, action_cls, sentinel: str, error_cls: Type[Exception], record_name: str, section: str):
    """Read an action name line followed by its description block."""
    name = read_action_name(reader, error_cls, record_name, section)
    description = read_block(reader, sentinel, record_name)
    return action_cls(name, join_description(description))
