"""ORM model for application users: clients, businesses and admins."""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import relationship

from citylinker.models.base import Base
from citylinker.models.enums import UserRole, enum_values


class User(Base):
    """
    User account with an optional business profile.

    role: 'client', 'business' or 'admin'. Deleting a user removes their
    publications, reviews and sessions (ON DELETE CASCADE).
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.CLIENT,
    )

    business_name = Column(String(255), nullable=True)
    business_description = Column(Text, nullable=True)
    business_address = Column(String(512), nullable=True)
    business_phone = Column(String(50), nullable=True)
    business_website = Column(String(512), nullable=True)
    business_image = Column(String(1024), nullable=True)
    business_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    publications = relationship("Publication", back_populates="user", passive_deletes=True)
    reviews = relationship("Review", back_populates="user", passive_deletes=True)
