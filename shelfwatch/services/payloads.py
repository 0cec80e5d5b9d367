"""
Pure helpers that shape collaborator payloads.

Nothing here does I/O, so the prompt text and the supplier extraction
heuristics can be tested without an HTTP client.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from ..data.models import (
    ExistingSupplier,
    InventoryContext,
    ProcurementAnalysis,
    SupplierCandidate,
    SupplierOption,
)

CONTACT_PLACEHOLDER = "N/A"
DESCRIPTION_LIMIT = 500

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
LOCATION_RE = re.compile(r"([A-Z][a-z]+(?:\s[A-Z][a-z]+)*,?\s[A-Z]{2})")
PRICE_RE = re.compile(r"\$\s*(\d+(?:\.\d{2})?)")


# ---- Supplier search ----

def supplier_search_query(item_name: str, location: Optional[str] = None) -> str:
    query = f"{item_name} wholesale supplier"
    return f"{query} {location}" if location else query


def extract_supplier_info(result: Mapping[str, Any]) -> SupplierCandidate:
    """Pull contact details out of one web search result.

    The first email, US-style phone number, "City, ST" location and dollar
    price in the page text win. The result title becomes the supplier name.
    """
    content = result.get("content") or ""
    email = EMAIL_RE.search(content)
    phone = PHONE_RE.search(content)
    location = LOCATION_RE.search(content)
    price = PRICE_RE.search(content)

    return SupplierCandidate(
        name=result.get("title") or "",
        contact_email=email.group(0) if email else None,
        contact_phone=phone.group(0) if phone else None,
        location=location.group(0) if location else None,
        website=result.get("url") or None,
        description=content[:DESCRIPTION_LIMIT],
        estimated_price=float(price.group(1)) if price else None,
    )


def supplier_options(candidates: List[SupplierCandidate]) -> List[SupplierOption]:
    """Flatten candidates for the reasoning prompt; contact is email, then phone, then "N/A"."""
    return [
        SupplierOption(
            name=c.name,
            contact=c.contact_email or c.contact_phone or CONTACT_PLACEHOLDER,
            location=c.location,
            estimated_price=c.estimated_price,
        )
        for c in candidates
    ]


# ---- Reasoning prompt ----

REASONING_SYSTEM_PROMPT = (
    "You are an expert procurement analyst. Analyze inventory and supplier data, "
    "then provide structured JSON recommendations. Always respond with valid JSON only."
)

_OUTPUT_FORMAT = """{
  "supplier_recommendations": {
    "should_add_new_suppliers": boolean,
    "suppliers_to_add": [{"name": "Supplier Name", "contact": "contact info", "reason": "why we should add them"}],
    "should_update_prices": boolean,
    "price_updates": [{"supplier_name": "Existing Supplier", "product_name": "Product Name",
                       "current_price": 10.50, "suggested_price": 9.80, "reason": "market price decreased"}]
  },
  "order_recommendation": {
    "item_name": "%(item_name)s",
    "recommended_quantity": 100,
    "recommended_supplier": "Best Supplier Name",
    "supplier_id": "id-if-existing-supplier",
    "unit_price": 10.50,
    "total_cost": 1050.00,
    "currency": "USD",
    "lead_time_days": 3,
    "reasoning": "Clear explanation of why this supplier and quantity"
  },
  "full_reasoning": "Comprehensive paragraph explaining the entire analysis and recommendations"
}"""


def _format_existing(suppliers: List[ExistingSupplier]) -> str:
    if not suppliers:
        return "None on record."
    blocks = []
    for i, s in enumerate(suppliers, start=1):
        products = "\n".join(
            f"   - {p.product_name}: ${p.unit_price} {p.currency}, "
            f"MOQ: {p.min_order_quantity}, Lead: {p.lead_time_days} days"
            for p in s.products
        )
        blocks.append(
            f"{i}. {s.name} (id: {s.supplier_id})\n"
            f"   Contact: {s.contact_email or s.contact_phone or CONTACT_PLACEHOLDER}\n"
            f"   Location: {s.location or CONTACT_PLACEHOLDER}\n"
            f"   Products:\n{products}"
        )
    return "\n".join(blocks)


def _format_new(options: List[SupplierOption]) -> str:
    if not options:
        return "None found."
    blocks = []
    for i, s in enumerate(options, start=1):
        price = f"${s.estimated_price}" if s.estimated_price is not None else "Unknown"
        blocks.append(
            f"{i}. {s.name}\n"
            f"   Contact: {s.contact}\n"
            f"   Location: {s.location or 'Unknown'}\n"
            f"   Estimated Price: {price}"
        )
    return "\n".join(blocks)


def build_procurement_prompt(
    context: InventoryContext,
    existing_suppliers: List[ExistingSupplier],
    new_suppliers: List[SupplierOption],
) -> str:
    days_left = context.days_until_stock_out if context.days_until_stock_out is not None else "Unknown"
    return (
        "You are an AI procurement analyst for an inventory management system. "
        "Analyze the following data and provide recommendations.\n\n"
        "CURRENT INVENTORY SITUATION:\n"
        f"- Item: {context.item_name}\n"
        f"- Current Stock: {context.current_quantity} units\n"
        f"- Reorder Level: {context.reorder_level} units\n"
        f"- Minimum Stock: {context.minimum_stock} units\n"
        f"- Days Until Stock-Out: {days_left} days\n"
        f"- Estimated Daily Usage: {context.estimated_daily_usage} units/day\n\n"
        "EXISTING SUPPLIERS (from our records):\n"
        f"{_format_existing(existing_suppliers)}\n\n"
        "NEW SUPPLIERS (from web search):\n"
        f"{_format_new(new_suppliers)}\n\n"
        "YOUR TASK:\n"
        "1. Determine if we should add any of the new suppliers to our records\n"
        "2. Determine if we should update any prices based on new market data\n"
        "3. Recommend a specific order: which supplier, how much to order, at what price\n"
        "4. Provide clear reasoning for your decisions\n\n"
        "OUTPUT FORMAT (JSON only, no additional text):\n"
        + _OUTPUT_FORMAT % {"item_name": context.item_name}
    )


# ---- Recommendation summary ----

def generate_recommendation_summary(analysis: ProcurementAnalysis) -> str:
    """Plain-language summary of an analysis, read out by the voice agent."""
    order = analysis.order_recommendation
    suppliers = analysis.supplier_recommendations

    parts = [
        "Based on my analysis of your inventory and available suppliers, here's my recommendation:\n\n",
        "Order Recommendation:\n",
        f"I suggest ordering {order.recommended_quantity} units of {order.item_name} "
        f"from {order.recommended_supplier}. ",
        f"The total cost will be ${order.total_cost:.2f} {order.currency} "
        f"(${order.unit_price:.2f} per unit), with an expected delivery in {order.lead_time_days} days.\n\n",
        f"Reasoning:\n{order.reasoning}\n\n",
    ]

    if suppliers.should_add_new_suppliers and suppliers.suppliers_to_add:
        parts.append("New Suppliers to Consider:\n")
        parts.extend(f"- {s.name} ({s.contact}): {s.reason}\n" for s in suppliers.suppliers_to_add)
        parts.append("\n")

    if suppliers.should_update_prices and suppliers.price_updates:
        parts.append("Price Updates Recommended:\n")
        parts.extend(
            f"- {p.supplier_name} - {p.product_name}: ${p.current_price} -> ${p.suggested_price} ({p.reason})\n"
            for p in suppliers.price_updates
        )
        parts.append("\n")

    parts.append("\nWould you like to approve this order?")
    return "".join(parts)


def recommendation_payload(analysis: ProcurementAnalysis) -> Dict[str, Any]:
    """JSON-safe dict stored alongside the conversation."""
    return analysis.model_dump(mode="json")
