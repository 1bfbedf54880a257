"""
Store model: physical locations, read only for the application.
"""
from sqlalchemy import Boolean, Column, Integer, Numeric, String
from sqlalchemy.orm import relationship

from ..db import Base


class Store(Base):
    __tablename__ = "store"

    store_id = Column("storeid", Integer, primary_key=True, autoincrement=False)
    address = Column(String(100), nullable=False)
    city = Column(String(50), nullable=False)
    state = Column(String(50), nullable=False)
    is_open = Column("isopen", Boolean, nullable=False, default=True)
    review_score = Column("reviewscore", Numeric(4, 2))

    orders = relationship("FoodOrder", back_populates="store", lazy="select")
