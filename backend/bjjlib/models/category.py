from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from bjjlib.database import Base


class TagCategory(Base):
    """Named group of tags, shown in display_order."""

    __tablename__ = "tag_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    display_order = Column(Integer, default=0, nullable=False, index=True)

    # Relationships
    tags = relationship("Tag", back_populates="category", order_by="Tag.name")
