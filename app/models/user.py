from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Text, func
from sqlalchemy.orm import relationship
from app.db.base_class import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(150), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="reseller", index=True) # "admin" or "reseller"
    credit_balance = Column(Numeric(10, 2), nullable=False, default=0)
    reseller_group = Column(Integer, nullable=False, default=1) # Selects group1_price / group2_price
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    clients = relationship("Client", back_populates="reseller")
    user_products = relationship("UserProduct", back_populates="user")
    transactions = relationship("Transaction", back_populates="user", order_by="Transaction.created_at.desc()")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
