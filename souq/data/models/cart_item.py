from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from souq.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    sku = Column(String(100), nullable=False)

    quantity = Column(Integer, nullable=False)
    # zero or NULL means the price was never captured
    price = Column(Numeric(10, 2), nullable=True, default=0)
    notes = Column(Text, nullable=True)

    cart = relationship("CartModel", back_populates="items")
    product = relationship("ProductModel")
