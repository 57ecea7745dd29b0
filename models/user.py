import uuid
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Identity row vouched for by Google. Marketplace role lives on ``Profile``."""

    __tablename__ = "user"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    email_verified = Column(Boolean, default=False, nullable=False)
    name = Column(String(255), nullable=True)
    image = Column(String(512), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    profile = relationship("Profile", uselist=False, back_populates="user", cascade="all, delete-orphan")
    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
