"""Shared fixtures: a small rules document in the exported plain-text dialect."""

import pytest

from greed_rules.parse_document import segment


RULES_TEXT = """Greed Rules
Version 0.20
Table of contents
Origins

Human
Humans are adaptable and gain no origin abilities.

Dwarf
Utilities
Stonecunning
\t- Know how deep underground you are.
\t- Sense hidden doors within 2 spaces.
Passive
Sturdy
\t- Take 1 less damage from the first hit each battle.
Primary
Hammer Blow
Deal 2 damage.
Secondary
Brace
Gain 1 defense until your next turn.
Special
Mountain's Endurance
Ignore all damage this round.

Elf
Utilities
Keen Sight
\t- See in dim light.
Passive
Graceful
\t- Move through allies freely.
Light Step
\t- Ignore difficult terrain.
Primary
Longbow
Deal 2 damage at range.
Secondary
Step Back
Move 1 space.
Special
Starlight
Blind every enemy for one round.

Template
Class Name (Level) Req: Requirements
Utilities
Passive
Primary
Secondary
Special
Subclasses

Warrior (I)
Utilities
Battle Cry
\t- Allies gain +1 attack this round.
Passive
Toughness
\t- +2 maximum health.
Primary
Strike
Deal 3 damage.
Secondary
Shove
Push an enemy 1 space.
Special
Whirlwind
Hit every adjacent enemy.
Subclasses
\t- Knight

Mage (I)
Utilities
Detect Magic
\t- Sense magic items nearby.
Passive
Arcane Focus
\t- Spells cost 1 less.
Primary
Firebolt
Deal 2 fire damage at range.
Secondary
Blink
Teleport 2 spaces.
Special
Fireball
Deal 4 damage to everything in an area.
Subclasses
\t- Paladin

Knight (II) Req: Warrior
Utilities
Banner
\t- Allies near you cannot be frightened.
Passive
Plate Armor
\t- +1 defense.
\t- Cannot swim.
Primary
Lance Charge
Move 3 spaces and deal 3 damage.
Secondary
Guard
Protect an adjacent ally.
Special
Last Stand
Stay at 1 health until the end of the battle.
Subclasses
\t- Paladin

Paladin (III) Req: Knight, Any Level II "Mage"
Utilities
Oath
\t- Swear an oath to an ally.
Passive
Aura
\t- Allies within 2 spaces gain +1 defense.
Primary
Smite
Deal 4 radiant damage.
Secondary
Shield Bash
Push an enemy 1 space.
Special
Lay on Hands
Heal an ally fully.
Subclasses
\t- None yet

Idea Bank
Gunslinger (I)
Pistols, maybe.
"""


@pytest.fixture
def rules_text():
    return RULES_TEXT


@pytest.fixture
def rules_lines():
    return segment(RULES_TEXT)
