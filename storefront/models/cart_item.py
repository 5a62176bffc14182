from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class CartItem(Base):
    __tablename__ = "cart_item"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", "cut_style", name="uq_cart_item_line"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(128), ForeignKey("user.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("product.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    cut_style = Column(String(64), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=utcnow)

    product = relationship("Product", lazy="joined")
