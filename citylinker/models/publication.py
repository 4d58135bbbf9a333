"""ORM model for business listings (announcements, services, articles)."""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from citylinker.models.base import Base
from citylinker.models.enums import PublicationStatus, PublicationType, enum_values


class Publication(Base):
    """
    Listing owned by one business user and filed under one category.

    New rows start 'pending'; only admins move them to 'approved' or 'rejected'.
    """

    __tablename__ = "publications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    type = Column(
        Enum(PublicationType, name="publication_type", values_callable=enum_values),
        nullable=False,
    )
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=True)
    description = Column(Text, nullable=False)
    content = Column(Text, nullable=True)

    image = Column(String(1024), nullable=True)
    price = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)

    status = Column(
        Enum(PublicationStatus, name="publication_status", values_callable=enum_values),
        nullable=False,
        default=PublicationStatus.PENDING,
        index=True,
    )
    rejection_reason = Column(Text, nullable=True)
    views = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = relationship("User", back_populates="publications")
    category = relationship("Category", back_populates="publications")
    reviews = relationship("Review", back_populates="publication", passive_deletes=True)
