from sqlalchemy import Column, String, Text, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship
from models.base import Base, TimestampMixin
from core.lifecycle import Role


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    # Same id as the identity row; role is fixed once the profile exists
    id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True)
    role = Column(
        Enum(Role, native_enum=False, create_constraint=True, length=16,
             values_callable=_enum_values, validate_strings=True, name="profile_role"),
        nullable=False,
    )
    bio = Column(Text, nullable=True)
    skillset = Column(JSON, nullable=True)
    portfolio_urls = Column(JSON, nullable=True)
    preferences = Column(JSON, nullable=True)

    user = relationship("User", back_populates="profile")
