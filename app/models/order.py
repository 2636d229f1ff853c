from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

ORDER_STATUSES = ("pending", "active", "rejected")
PROVISION_METHODS = ("courier", "self")

class ProductOrder(Base):
    __tablename__ = "product_orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    reseller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    status = Column(String(20), nullable=False, default="pending", index=True)
    provision_method = Column(String(20), nullable=False) # "courier" or "self"

    # self provisioning
    sim_number = Column(String(64), nullable=True)
    # courier provisioning
    address = Column(Text, nullable=True)
    contact_name = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    country = Column(String(100), nullable=True)

    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    reseller = relationship("User")
    client = relationship("Client")
    product = relationship("Product")
    user_product = relationship("UserProduct", back_populates="source_order", uselist=False)

    @property
    def is_terminal(self) -> bool:
        return self.status in ("active", "rejected")

    def __repr__(self):
        return f"<ProductOrder(id={self.id}, reseller_id={self.reseller_id}, product_id={self.product_id}, status='{self.status}')>"
