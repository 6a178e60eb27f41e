import uuid
from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship

from invoicedesk.db.base_class import Base

class Customer(Base):
    # __tablename__ will be 'customers'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    image_url = Column(String(1024), nullable=True)

    # Invoices reference a customer; customers are never deleted through this app
    invoices = relationship("Invoice", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.id}, email='{self.email}')>"
