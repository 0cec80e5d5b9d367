"""
Turn the vision collaborator's free text into (name, quantity) pairs.

Each line is tried against PARSE_RULES in order. A rule's match is kept only
when the trimmed name is non-empty and the quantity is a positive integer;
otherwise the next rule gets a chance. Lines no rule accepts are dropped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from shelfwatch.data.models import ParsedItem
from shelfwatch.logging import get_logger

logger = get_logger(__name__)

Extractor = Callable[[re.Match], Tuple[str, str]]


@dataclass(frozen=True)
class ParseRule:
    name: str
    pattern: re.Pattern
    extract: Extractor

    def apply(self, line: str) -> Optional[ParsedItem]:
        match = self.pattern.search(line)
        if match is None:
            return None
        raw_name, raw_qty = self.extract(match)
        name = raw_name.strip()
        try:
            quantity = int(raw_qty)
        except ValueError:
            return None
        if not name or quantity <= 0:
            return None
        return ParsedItem(name=name, quantity=quantity)


def _quantity_first(match: re.Match) -> Tuple[str, str]:
    return match.group(2), match.group(1)


def _name_first(match: re.Match) -> Tuple[str, str]:
    return match.group(1), match.group(2)


PARSE_RULES: List[ParseRule] = [
    ParseRule("quantity_x_name", re.compile(r"(\d+)\s*x\s*(.+)", re.IGNORECASE), _quantity_first),
    ParseRule("name_colon_quantity", re.compile(r"(.+?):\s*(\d+)"), _name_first),
    ParseRule("name_paren_quantity", re.compile(r"(.+?)\s*\((\d+)\)"), _name_first),
    ParseRule("quantity_name", re.compile(r"(\d+)\s+(.+)"), _quantity_first),
]


def parse_line(line: str, rules: List[ParseRule] = PARSE_RULES) -> Optional[ParsedItem]:
    for rule in rules:
        item = rule.apply(line)
        if item is not None:
            return item
    return None


def parse_inventory_items(text: str) -> List[ParsedItem]:
    """Parse one vision response into items, keeping line order and duplicates."""
    items = []
    for line in text.splitlines():
        item = parse_line(line)
        if item is not None:
            items.append(item)
    logger.debug(f"Parsed {len(items)} items from {len(text.splitlines())} lines")
    return items
