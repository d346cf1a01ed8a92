#!/usr/bin/env python3
"""
Records produced by the rules parsers: actions, origins and classes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from greed_rules.parse_requirements import RequirementNode, requirement_from_dict, requirement_to_dict


@dataclass
class Action:
    """A named ability with its (possibly multi-line) rules text."""
    name: str = ''
    description: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'description': self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return cls(data.get('name', ''), data.get('description', ''))


class PrimaryAction(Action):
    pass


class SecondaryAction(Action):
    pass


class ClassUtility(Action):
    pass


class ClassPassive(Action):
    pass


@dataclass(eq=False)
class SpecialAction(Action):
    """Special action; ``usable`` is game state, not catalog data.

    Two special actions are the same action when their names match,
    whether or not either has been used this battle.
    """
    usable: bool = True

    def __eq__(self, other):
        if not isinstance(other, SpecialAction):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def use_action(self):
        self.usable = False

    def refresh(self):
        self.usable = True

    def is_usable(self) -> bool:
        return self.usable


def _actions_to_list(actions):
    return [action.to_dict() for action in actions]


@dataclass
class OriginRecord:
    """A character's starting archetype. Origins have no requirement."""
    name: str
    utilities: List[ClassUtility] = field(default_factory=list)
    passives: List[ClassPassive] = field(default_factory=list)
    primary: PrimaryAction = field(default_factory=PrimaryAction)
    secondary: SecondaryAction = field(default_factory=SecondaryAction)
    special: SpecialAction = field(default_factory=SpecialAction)

    def get_special_actions(self) -> List[SpecialAction]:
        return [self.special] if self.special.name else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'utilities': _actions_to_list(self.utilities),
            'passives': _actions_to_list(self.passives),
            'primary': self.primary.to_dict(),
            'secondary': self.secondary.to_dict(),
            'special': self.special.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OriginRecord':
        return cls(
            name=data['name'],
            utilities=[ClassUtility.from_dict(item) for item in data.get('utilities', [])],
            passives=[ClassPassive.from_dict(item) for item in data.get('passives', [])],
            primary=PrimaryAction.from_dict(data.get('primary', {})),
            secondary=SecondaryAction.from_dict(data.get('secondary', {})),
            special=SpecialAction.from_dict(data.get('special', {})),
        )


@dataclass
class ClassRecord(OriginRecord):
    """A leveled, acquirable role gated by an optional requirement."""
    level: Optional[int] = None
    requirement: Optional[RequirementNode] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['level'] = self.level
        data['requirement'] = requirement_to_dict(self.requirement) if self.requirement is not None else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClassRecord':
        origin = OriginRecord.from_dict(data)
        requirement = data.get('requirement')
        return cls(
            name=origin.name,
            utilities=origin.utilities,
            passives=origin.passives,
            primary=origin.primary,
            secondary=origin.secondary,
            special=origin.special,
            level=data.get('level'),
            requirement=requirement_from_dict(requirement) if requirement else None,
        )
