"""
Menu item model
"""
from sqlalchemy import CheckConstraint, Column, Numeric, String

from ..db import Base


class Item(Base):

    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_items_price_non_negative"),
    )

    item_name = Column("itemname", String(50), primary_key=True)
    ingredients = Column(String(300), nullable=False, default="")
    # "entree", "drinks", "sides", ...
    type_of_item = Column("typeofitem", String(40), nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(String(400), default="")
