import uuid
from sqlalchemy import Column, String, Uuid
from invoicedesk.db.base_class import Base

class User(Base):
    # __tablename__ will be 'users'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
