from sqlalchemy import Column, DateTime, String
from .base import Base, utcnow


class User(Base):
    __tablename__ = "user"

    id = Column(String(128), primary_key=True)
    email = Column(String(255), nullable=True, index=True)
    first_name = Column(String(128), nullable=True)
    last_name = Column(String(128), nullable=True)
    profile_image_url = Column(String(512), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
