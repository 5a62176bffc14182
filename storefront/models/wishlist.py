from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class WishlistItem(Base):
    __tablename__ = "wishlist"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_wishlist_entry"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(128), ForeignKey("user.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("product.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    product = relationship("Product", lazy="joined")
