"""
User model: customers, drivers and managers.
"""
import enum

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from ..db import Base


class UserRole(str, enum.Enum):
    customer = "customer"
    manager = "manager"
    driver = "driver"


class RoleType(TypeDecorator):
    """UserRole stored as its plain name; older rows may be padded or capitalised"""
    impl = String(20)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return UserRole(value).value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return UserRole(value.strip().lower())


class User(Base):
    __tablename__ = "users"

    login = Column(String(50), primary_key=True)
    # passlib hash; legacy rows may still hold cleartext
    password = Column(String(255), nullable=False)
    role = Column(RoleType, nullable=False)
    favorite_items = Column("favoriteitems", String(400), nullable=False, default="")
    phone_num = Column("phonenum", String(20))

    # Relationships
    orders = relationship("FoodOrder", back_populates="user", lazy="select")
