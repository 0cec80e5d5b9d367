from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class SupplierProduct(BaseModel):
    """Price and terms for one product from a known supplier."""
    product_name: str = Field(description="Product name at the supplier")
    unit_price: float = Field(ge=0, description="Price per unit")
    currency: str = Field(default="USD", description="Price currency")
    min_order_quantity: int = Field(default=1, ge=1, description="Minimum order quantity")
    lead_time_days: int = Field(default=1, ge=0, description="Delivery lead time in days")


class ExistingSupplier(BaseModel):
    """A supplier already recorded in the persistence layer."""
    supplier_id: str = Field(description="Unique supplier identifier")
    name: str = Field(description="Supplier company name")
    contact_phone: Optional[str] = Field(default=None, description="Phone number")
    contact_email: Optional[str] = Field(default=None, description="Email address")
    location: Optional[str] = Field(default=None, description="City / region")
    products: List[SupplierProduct] = Field(default_factory=list, description="Products offered")


class SupplierCandidate(BaseModel):
    """A supplier found by the search collaborator, not yet in our records."""
    name: str = Field(description="Supplier name (search result title)")
    contact_email: Optional[str] = Field(default=None, description="Email found in the page text")
    contact_phone: Optional[str] = Field(default=None, description="Phone found in the page text")
    location: Optional[str] = Field(default=None, description="'City, ST' found in the page text")
    website: Optional[str] = Field(default=None, description="Result URL")
    description: Optional[str] = Field(default=None, description="First 500 characters of the page text")
    estimated_price: Optional[float] = Field(default=None, description="First dollar price in the page text")
