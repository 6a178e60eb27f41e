import uuid
from sqlalchemy import Column, Integer, ForeignKey, Date, Uuid, Enum as DBEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from invoicedesk.db.base_class import Base
from invoicedesk.schemas.invoice import InvoiceStatusEnum

class Invoice(Base):
    # __tablename__ will be 'invoices'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False) # Always integer cents
    status = Column(
        DBEnum(
            InvoiceStatusEnum,
            name="invoice_status_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=InvoiceStatusEnum.PENDING,
        index=True,
    )
    date = Column(Date, nullable=False, default=func.current_date(), index=True)

    customer = relationship("Customer", back_populates="invoices")

    def __repr__(self):
        return f"<Invoice(id={self.id}, amount={self.amount}, status='{self.status}')>"
