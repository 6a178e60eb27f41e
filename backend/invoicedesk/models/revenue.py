from sqlalchemy import Column, Integer, String

from invoicedesk.db.base_class import Base

class Revenue(Base):
    __tablename__ = "revenue" # Reference data, one row per month

    month = Column(String(16), primary_key=True)
    revenue = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<Revenue(month='{self.month}', revenue={self.revenue})>"
