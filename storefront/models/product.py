from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, Numeric, String, Text
from .base import Base, utcnow


class Product(Base):
    __tablename__ = "product"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(64), nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False)
    original_price = Column(Numeric(12, 2), nullable=True)
    image_url = Column(String(512), nullable=True)
    cut_styles = Column(JSON, nullable=False, default=list)
    freshness_days = Column(Integer, nullable=False, default=3)
    is_organic = Column(Boolean, nullable=False, default=False)
    nutrition_info = Column(JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
