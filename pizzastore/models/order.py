"""
Order models: a FoodOrder header and its ItemsInOrder line items.
"""
import enum
from datetime import datetime, timezone

from sqlalchemy import (CheckConstraint, Column, DateTime, Enum, ForeignKey,
                        Integer, Numeric, Sequence, String)
from sqlalchemy.orm import relationship

from ..db import Base

# Order ids come from this sequence on PostgreSQL and from the rowid on SQLite.
ORDER_ID_SEQUENCE = Sequence("foodorder_orderid_seq")


def utc_now():
    """Naive UTC timestamp, matching the timezone-less ordertimestamp column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class OrderStatus(str, enum.Enum):
    pending = "Pending"
    delivered = "Delivered"


class FoodOrder(Base):
    __tablename__ = "foodorder"
    __table_args__ = (
        CheckConstraint("totalprice >= 0", name="ck_foodorder_total_non_negative"),
    )

    order_id = Column("orderid", Integer, ORDER_ID_SEQUENCE, primary_key=True)
    login = Column(String(50), ForeignKey("users.login"), nullable=False, index=True)
    store_id = Column("storeid", Integer, ForeignKey("store.storeid"), nullable=False)
    total_price = Column("totalprice", Numeric(10, 2), nullable=False)
    order_timestamp = Column("ordertimestamp", DateTime, default=utc_now,
                             nullable=False)
    order_status = Column(
        "orderstatus",
        Enum(OrderStatus, native_enum=False, length=20,
             values_callable=lambda statuses: [s.value for s in statuses]),
        default=OrderStatus.pending, nullable=False)

    # Relationships
    user = relationship("User", back_populates="orders", lazy="select")
    store = relationship("Store", back_populates="orders", lazy="select")
    items = relationship("ItemsInOrder", back_populates="order", lazy="select",
                         order_by="ItemsInOrder.item_name")

    def is_delivered(self):
        return self.order_status == OrderStatus.delivered


class ItemsInOrder(Base):
    __tablename__ = "itemsinorder"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_itemsinorder_quantity_positive"),
    )

    order_id = Column("orderid", Integer, ForeignKey("foodorder.orderid"),
                      primary_key=True)
    item_name = Column("itemname", String(50), ForeignKey("items.itemname"),
                       primary_key=True)
    quantity = Column(Integer, nullable=False, default=1)

    order = relationship("FoodOrder", back_populates="items")
    item = relationship("Item", lazy="joined")
