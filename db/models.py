from sqlalchemy import Column, Integer, Text, JSON, DateTime
from sqlalchemy.sql import func
from .database import Base


class Product(Base):
    __tablename__ = "products"
    # ids must never be reused after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    brand = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    ingredients = Column(JSON, nullable=False)
    usage_instructions = Column(Text, nullable=False)
    warnings = Column(Text, nullable=False)
    expiry_date = Column(Text, nullable=True)
    time_left = Column(Text, nullable=True)
    recommended_for = Column(Text, nullable=False)
    not_recommended_for = Column(Text, nullable=False)
    user_sentiment = Column(JSON, nullable=False)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
