from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, Numeric, String
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class Order(Base):
    __tablename__ = "order"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(128), ForeignKey("user.id"), nullable=False, index=True)
    status = Column(String(32), nullable=False, default="pending")
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax = Column(Numeric(12, 2), nullable=False)
    delivery_fee = Column(Numeric(12, 2), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    delivery_address = Column(JSON, nullable=False)
    delivery_slot = Column(String(64), nullable=True)
    payment_method = Column(String(32), nullable=False)
    payment_status = Column(String(32), nullable=False, default="pending")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
    )


class OrderItem(Base):
    __tablename__ = "order_item"

    id = Column(String(36), primary_key=True)
    order_id = Column(String(36), ForeignKey("order.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(String(36), ForeignKey("product.id"), nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    cut_style = Column(String(64), nullable=False, default="")
    price = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    order = relationship("Order", back_populates="items")
    product = relationship("Product", lazy="joined")
