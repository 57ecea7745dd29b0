import uuid
from sqlalchemy import Column, String, DateTime, Index, UniqueConstraint
from models.base import Base, TimestampMixin


class Verification(Base, TimestampMixin):
    """One-time values such as OAuth ``state`` tokens. Deleted on first use."""

    __tablename__ = "verification"
    __table_args__ = (
        UniqueConstraint("identifier", "value", name="uq_verification_identifier_value"),
    )

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    identifier = Column(String(64), nullable=False)
    value = Column(String(255), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

Index("idx_verification_expires_at", Verification.expires_at)
