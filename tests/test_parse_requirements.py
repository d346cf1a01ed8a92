"""
Tests for the requirement mini-language (greed_rules/parse_requirements.py)

Run: pytest tests/test_parse_requirements.py -v
"""

import pytest

from greed_rules.models import ClassRecord
from greed_rules.parse_requirements import (
    And,
    LevelPrefix,
    SuperClass,
    format_requirement,
    meets_requirement,
    parse_requirement,
    requirement_from_dict,
    requirement_to_dict,
)


def held(*classes):
    return [ClassRecord(name, level=level) for name, level in classes]


# ─── Unit tests: parsing ────────────────────────────────────────────────────

class TestParseRequirement:
    def test_bare_name(self):
        assert parse_requirement("Knight") == SuperClass("Knight")

    def test_bare_name_is_trimmed(self):
        assert parse_requirement("  Knight  ") == SuperClass("Knight")

    def test_any_level(self):
        assert parse_requirement('Any Level II "Warrior"') == LevelPrefix(2, "Warrior")

    def test_any_level_typographic_quotes(self):
        assert parse_requirement("Any Level III “Mage”") == LevelPrefix(3, "Mage")

    def test_any_level_bad_numeral_defaults_to_zero(self):
        assert parse_requirement('Any Level VII "Rogue"') == LevelPrefix(0, "Rogue")

    def test_any_level_without_numeral(self):
        assert parse_requirement('Any Level "Rogue"') == LevelPrefix(0, "Rogue")

    def test_any_level_without_quotes_uses_remaining_text(self):
        assert parse_requirement("Any Level II Rogue") == LevelPrefix(2, "Rogue")

    def test_comma_splits_right_recursively(self):
        assert parse_requirement('A, Any Level II "B"') == And(SuperClass("A"), LevelPrefix(2, "B"))

    def test_three_terms_nest_to_the_right(self):
        assert parse_requirement("A, B, C") == And(SuperClass("A"), And(SuperClass("B"), SuperClass("C")))

    def test_comma_inside_prefix_splits(self):
        # Prefixes are assumed never to contain commas
        node = parse_requirement('Any Level I "Sword, Shield"')
        assert isinstance(node, And)

    def test_malformed_input_falls_back_to_name(self):
        assert parse_requirement("Level 3 or higher") == SuperClass("Level 3 or higher")


# ─── Unit tests: evaluation ─────────────────────────────────────────────────

class TestMeetsRequirement:
    def test_super_class_exact_name(self):
        node = SuperClass("Knight")
        assert meets_requirement(node, held(("Knight", 2)))
        assert not meets_requirement(node, held(("Knights", 2)))
        assert not meets_requirement(node, [])

    def test_and_needs_both(self):
        node = And(SuperClass("A"), SuperClass("B"))
        assert meets_requirement(node, held(("A", 1), ("B", 1)))
        assert not meets_requirement(node, held(("A", 1)))
        assert not meets_requirement(node, held(("B", 1)))

    def test_level_prefix(self):
        node = LevelPrefix(2, "Warrior")
        assert meets_requirement(node, held(("Warrior", 2)))
        assert meets_requirement(node, held(("Warrior Lord", 3)))
        assert not meets_requirement(node, held(("Warrior", 1)))
        assert not meets_requirement(node, held(("Mage", 5)))

    def test_level_prefix_ignores_unleveled_classes(self):
        assert not meets_requirement(LevelPrefix(0, "Warrior"), held(("Warrior", None)))

    def test_level_prefix_is_plain_string_prefix(self):
        assert meets_requirement(LevelPrefix(1, "Warrior"), held(("Warriorsbane", 1)))

    def test_and_short_circuits_on_left(self):
        class LevelTrap:
            name = "Zealot"

            @property
            def level(self):
                raise AssertionError("right-hand requirement was evaluated")

        node = And(SuperClass("A"), LevelPrefix(1, "Z"))
        assert not meets_requirement(node, [LevelTrap()])

    def test_evaluation_is_order_independent(self):
        node = parse_requirement('Knight, Any Level II "Mage"')
        classes = held(("Mage Adept", 2), ("Knight", 2))
        assert meets_requirement(node, classes) == meets_requirement(node, list(reversed(classes)))
        assert meets_requirement(node, classes) == meets_requirement(node, classes)

    def test_unknown_node_type(self):
        with pytest.raises(TypeError):
            meets_requirement("Knight", [])


# ─── Round trips ────────────────────────────────────────────────────────────

class TestFormatRequirement:
    def test_document_form(self):
        node = And(SuperClass("A"), LevelPrefix(2, "B"))
        assert format_requirement(node) == 'A, Any Level II "B"'

    @pytest.mark.parametrize("expr", [
        "Knight",
        'Any Level IV "Warrior"',
        'Knight, Any Level II "Mage", Rogue',
    ])
    def test_reparse_evaluates_identically(self, expr):
        node = parse_requirement(expr)
        reparsed = parse_requirement(format_requirement(node))
        for classes in [
            [],
            held(("Knight", 1)),
            held(("Knight", 1), ("Mage", 2), ("Rogue", 1)),
            held(("Warrior", 4)),
            held(("Warrior", 3)),
        ]:
            assert meets_requirement(node, classes) == meets_requirement(reparsed, classes)

    def test_dict_form(self):
        node = parse_requirement('Knight, Any Level II "Mage"')
        data = requirement_to_dict(node)
        assert data["type"] == "and"
        assert requirement_from_dict(data) == node

    def test_unknown_dict_type(self):
        with pytest.raises(ValueError):
            requirement_from_dict({"type": "or"})
