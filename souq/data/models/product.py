# souq/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime, JSON

from souq.data.database import Base


class ProductModel(Base):
    """
    Product document. Variant groups and their options live in one JSON column:
    [{"name": "Storage", "options": [{"sku": "...", "price": 10, ...}]}]
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(JSON, nullable=False)  # {"en": ..., "ar": ...}
    description = Column(JSON, nullable=True)
    images = Column(JSON, nullable=False, default=list)
    variants = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
