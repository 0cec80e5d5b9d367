from shelfwatch.analysis.text_parser import PARSE_RULES, parse_inventory_items, parse_line
from shelfwatch.data.models import ParsedItem


def test_parses_mixed_formats_in_line_order():
    text = "12x Coca Cola Cans\n8 Potato Chips Bags\nWater Bottles: 15"
    assert parse_inventory_items(text) == [
        ParsedItem(name="Coca Cola Cans", quantity=12),
        ParsedItem(name="Potato Chips Bags", quantity=8),
        ParsedItem(name="Water Bottles", quantity=15),
    ]


def test_no_recognisable_lines_yields_empty_list():
    assert parse_inventory_items("not a valid line\n\n") == []
    assert parse_inventory_items("") == []


def test_parenthesised_quantity():
    assert parse_line("Paper Towels (6)") == ParsedItem(name="Paper Towels", quantity=6)


def test_uppercase_x_separator():
    assert parse_line("4 X Dish Soap") == ParsedItem(name="Dish Soap", quantity=4)


def test_ambiguous_line_resolved_by_rule_priority():
    """'3 Cement Bags (3)' fits both the parenthesised and the leading-quantity
    forms; the parenthesised rule is tried first, so the name keeps its leading 3."""
    assert parse_line("3 Cement Bags (3)") == ParsedItem(name="3 Cement Bags", quantity=3)


def test_zero_quantity_is_skipped():
    assert parse_inventory_items("Sponges: 0\n0 Staples") == []


def test_rejected_match_falls_through_to_later_rule():
    # "Cans: 0" is rejected by the colon rule; the leading-quantity rule then accepts the line.
    assert parse_line("24 Cans: 0") == ParsedItem(name="Cans: 0", quantity=24)


def test_names_are_trimmed_and_duplicates_kept():
    items = parse_inventory_items("  Trail Mix :  5  \nTrail Mix: 2")
    assert [(i.name, i.quantity) for i in items] == [("Trail Mix", 5), ("Trail Mix", 2)]


def test_rules_are_tried_in_fixed_order():
    assert [r.name for r in PARSE_RULES] == [
        "quantity_x_name",
        "name_colon_quantity",
        "name_paren_quantity",
        "quantity_name",
    ]


def test_custom_rule_list():
    assert parse_line("Water Bottles: 15", rules=PARSE_RULES[:1]) is None
