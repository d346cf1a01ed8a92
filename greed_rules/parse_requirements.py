#!/usr/bin/env python3
"""
Parse the "Req:" mini-language attached to class headers.

Grammar, as written in the rules document:

    requirement := term | term "," requirement
    term        := "Any Level" NUMERAL '"' prefix '"' | class-name

Examples handled:
- 'Knight' -> SuperClass('Knight')
- 'Any Level II "Warrior"' -> LevelPrefix(2, 'Warrior')
- 'Knight, Any Level II "Warrior"' -> And(SuperClass('Knight'), LevelPrefix(2, 'Warrior'))

The parser never fails: anything it does not recognise is read as a bare
class name.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Union

from greed_rules.parse_helpers import from_roman, to_roman

ANY_LEVEL_MARKER = 'Any Level'
QUOTE_CHARS = '"“”'
QUOTED_PATTERN = re.compile(r'["“]([^"”]*)["”]')


@dataclass(frozen=True)
class SuperClass:
    """Held when the candidate has a class with exactly this name."""
    name: str


@dataclass(frozen=True)
class LevelPrefix:
    """Held when any class starting with name_prefix is at least min_level."""
    min_level: int
    name_prefix: str


@dataclass(frozen=True)
class And:
    left: 'RequirementNode'
    right: 'RequirementNode'


RequirementNode = Union[SuperClass, LevelPrefix, And]


def parse_level_prefix(text: str) -> LevelPrefix:
    """Parse 'Any Level <numeral> "<prefix>"'.

    A numeral that does not decode counts as level 0. The prefix is the
    quoted fragment after the numeral; without quotes the remaining text is
    used as is.
    """
    rest = text[text.index(ANY_LEVEL_MARKER) + len(ANY_LEVEL_MARKER):].lstrip()
    parts = rest.split(maxsplit=1)
    token = parts[0] if parts else ''
    if token.startswith(tuple(QUOTE_CHARS)):
        token = ''
    level = from_roman(token) or 0
    after = rest[len(token):]

    quoted = QUOTED_PATTERN.search(after)
    if quoted:
        prefix = quoted.group(1)
    else:
        prefix = after.strip().strip(QUOTE_CHARS)
    return LevelPrefix(level, prefix)


def parse_requirement(expr: str) -> RequirementNode:
    """Parse a requirement expression into a tree of requirement nodes.

    Splits on the first comma and recurses on the remainder, so
    'A, B, C' becomes And(A, And(B, C)). Prefixes are assumed never to
    contain commas.
    """
    if ',' in expr:
        left, right = expr.split(',', 1)
        return And(parse_requirement(left), parse_requirement(right.lstrip()))

    if ANY_LEVEL_MARKER in expr:
        return parse_level_prefix(expr)

    return SuperClass(expr.strip())


def meets_requirement(node: RequirementNode, held_classes: Iterable[Any]) -> bool:
    """Decide whether the held classes satisfy the requirement.

    held_classes are class records (anything with ``name`` and ``level``).
    Level prefixes are a plain string-prefix test, so 'Warrior' also
    matches 'Warriorsbane'.
    """
    held_classes = list(held_classes)

    if isinstance(node, SuperClass):
        return any(held.name == node.name for held in held_classes)

    if isinstance(node, LevelPrefix):
        return any(
            held.name.startswith(node.name_prefix)
            and held.level is not None
            and held.level >= node.min_level
            for held in held_classes
        )

    if isinstance(node, And):
        return meets_requirement(node.left, held_classes) and meets_requirement(node.right, held_classes)

    raise TypeError(f"Unknown requirement node: {node!r}")


def format_requirement(node: RequirementNode) -> str:
    """Render a requirement back to the form it takes in the document."""
    if isinstance(node, SuperClass):
        return node.name
    if isinstance(node, LevelPrefix):
        return f'{ANY_LEVEL_MARKER} {to_roman(node.min_level)} "{node.name_prefix}"'
    if isinstance(node, And):
        return f'{format_requirement(node.left)}, {format_requirement(node.right)}'
    raise TypeError(f"Unknown requirement node: {node!r}")


def requirement_to_dict(node: RequirementNode) -> Dict[str, Any]:
    if isinstance(node, SuperClass):
        return {'type': 'super_class', 'name': node.name}
    if isinstance(node, LevelPrefix):
        return {'type': 'level_prefix', 'min_level': node.min_level, 'name_prefix': node.name_prefix}
    if isinstance(node, And):
        return {'type': 'and', 'left': requirement_to_dict(node.left), 'right': requirement_to_dict(node.right)}
    raise TypeError(f"Unknown requirement node: {node!r}")


def requirement_from_dict(data: Dict[str, Any]) -> RequirementNode:
    node_type = data.get('type')
    if node_type == 'super_class':
        return SuperClass(data['name'])
    if node_type == 'level_prefix':
        return LevelPrefix(int(data['min_level']), data['name_prefix'])
    if node_type == 'and':
        return And(requirement_from_dict(data['left']), requirement_from_dict(data['right']))
    raise ValueError(f"Unknown requirement type: {node_type!r}")
