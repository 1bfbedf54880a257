"""
Menu item schemas
"""
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


class ItemCreate(BaseModel):
    """Schema for adding a new menu item"""
    item_name: str = Field(..., description="Unique item name, e.g. Margherita")
    ingredients: str = ""
    type_of_item: str = Field("", description="Category, e.g. entree, drinks, sides")
    # Raw text; MenuService parses it and raises InvalidPrice
    price: str
    description: str = ""

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, value):
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return value

    @field_validator("item_name", "ingredients", "type_of_item", "price", "description")
    @classmethod
    def strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("item_name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("item name must not be blank")
        return value


class ItemUpdate(BaseModel):
    """
    Partial update of a menu item.

    A field that is missing, None or blank means "keep the stored value".
    """
    ingredients: Optional[str] = None
    type_of_item: Optional[str] = None
    price: Optional[str] = None
    description: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, value):
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return value

    def changes(self) -> Dict[str, str]:
        """Only the fields the caller actually wants to replace"""
        requested = {}
        for field, value in self.model_dump().items():
            if value is not None and value.strip():
                requested[field] = value.strip()
        return requested
