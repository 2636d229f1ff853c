from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.db.base_class import Base

class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    reseller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    reseller = relationship("User", back_populates="clients")
    products = relationship("ClientProduct", back_populates="client", order_by="ClientProduct.id")

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.name}', reseller_id={self.reseller_id})>"


class ClientProduct(Base):
    """A product a reseller bought on behalf of one of their clients."""
    __tablename__ = "client_products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    client = relationship("Client", back_populates="products")
    product = relationship("Product")

    def __repr__(self):
        return f"<ClientProduct(id={self.id}, client_id={self.client_id}, product_id={self.product_id}, status='{self.status}')>"
