import uuid
from sqlalchemy import Column, String, Text, Numeric, ForeignKey, Index, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from models.base import Base, TimestampMixin
from models.profile import _enum_values
from core.lifecycle import ProjectStatus, ReelType, PricingTier


def _enum(enum_cls, name):
    return Enum(enum_cls, native_enum=False, create_constraint=True, length=32,
                values_callable=_enum_values, validate_strings=True, name=name)


class Project(Base, TimestampMixin):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(
            "(pricing_tier = 'custom') = (custom_price IS NOT NULL)",
            name="ck_projects_custom_price",
        ),
    )

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    creator_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    editor_id = Column(String(64), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    raw_footage_url = Column(String(1024), nullable=True)
    editing_instructions = Column(Text, nullable=True)
    reel_type = Column(_enum(ReelType, "reel_type"), nullable=False, default=ReelType.INSTAGRAM)
    pricing_tier = Column(_enum(PricingTier, "pricing_tier"), nullable=False, default=PricingTier.BASIC)
    custom_price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    ai_brief = Column(Text, nullable=True)
    status = Column(_enum(ProjectStatus, "project_status"), nullable=False, default=ProjectStatus.DRAFT)

    versions = relationship(
        "ProjectVersion",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectVersion.version_number",
    )
    comments = relationship(
        "Comment",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
    rating = relationship("EditorRating", uselist=False, back_populates="project", cascade="all, delete-orphan")

Index("idx_projects_creator_id_updated_at", Project.creator_id, Project.updated_at.desc())
Index("idx_projects_editor_id_updated_at", Project.editor_id, Project.updated_at.desc())
Index("idx_projects_status_editor", Project.status, Project.editor_id)
