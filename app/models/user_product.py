from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

USER_PRODUCT_STATUSES = ("active", "pending", "suspended", "cancelled")

class UserProduct(Base):
    """A provisioned service instance owned by one user."""
    __tablename__ = "user_products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    username = Column(String(255), nullable=True) # Account name on the provisioning API
    msisdn = Column(String(32), nullable=True)
    sim_number = Column(String(64), nullable=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    comments = Column(Text, nullable=True)
    # Set when created by order approval; unique so an order provisions at most once
    source_order_id = Column(Integer, ForeignKey("product_orders.id"), nullable=True, unique=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="user_products")
    product = relationship("Product")
    source_order = relationship("ProductOrder", back_populates="user_product")
    endpoints = relationship(
        "UserProductEndpoint",
        back_populates="user_product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<UserProduct(id={self.id}, user_id={self.user_id}, product_id={self.product_id}, status='{self.status}')>"


class UserProductEndpoint(Base):
    __tablename__ = "user_product_endpoints"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_product_id = Column(Integer, ForeignKey("user_products.id", ondelete="CASCADE"), nullable=False, index=True)
    api_setting_id = Column(Integer, ForeignKey("api_settings.id"), nullable=False)
    endpoint_path = Column(String(255), nullable=False)
    custom_parameters = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    user_product = relationship("UserProduct", back_populates="endpoints")
    api_setting = relationship("ApiSetting")

    def __repr__(self):
        return f"<UserProductEndpoint(id={self.id}, user_product_id={self.user_product_id}, path='{self.endpoint_path}')>"
