from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from app.db.base_class import Base

class ApiSetting(Base):
    __tablename__ = "api_settings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    endpoint = Column(String(255), nullable=False) # Path template on the provisioning API, e.g. "/sim/status"
    master_category = Column(String(20), nullable=False, index=True)
    is_enabled = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<ApiSetting(id={self.id}, name='{self.name}', endpoint='{self.endpoint}')>"
