"""ORM model for the fixed taxonomy of publication categories."""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from citylinker.models.base import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    icon = Column(String(64), nullable=False)
    description = Column(Text, nullable=True)

    publications = relationship("Publication", back_populates="category")
