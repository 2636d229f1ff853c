from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(10, 2), nullable=False, default=0)
    group1_price = Column(Numeric(10, 2), nullable=False, default=0)
    group2_price = Column(Numeric(10, 2), nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("product_categories.id"), nullable=True, index=True)
    status = Column(String(20), nullable=False, default="active") # active, limited, outofstock
    api_endpoint = Column(String(255), nullable=False, default="")
    api_identifier = Column(String(255), nullable=False, default="") # Package id on the provisioning API
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    category = relationship("ProductCategory", back_populates="products")

    @property
    def master_category(self):
        return self.category.master_category if self.category else None

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', status='{self.status}')>"
