"""
Order schemas
"""
from typing import List

from pydantic import BaseModel, Field, field_validator


class OrderLine(BaseModel):
    item_name: str
    # Checked by OrderService so a bad quantity comes back as InvalidInput
    quantity: int = 1

    @field_validator("item_name")
    @classmethod
    def strip(cls, value: str) -> str:
        return value.strip()


class OrderCreate(BaseModel):
    login: str
    store_id: int
    items: List[OrderLine] = Field(..., min_length=1)

    @classmethod
    def single(cls, login: str, store_id: int, item_name: str,
               quantity: int = 1) -> "OrderCreate":
        """The common case: one item, quantity 1 by default"""
        return cls(login=login, store_id=store_id,
                   items=[OrderLine(item_name=item_name, quantity=quantity)])
