from app.database.database import Base
from sqlalchemy import Column, String, Text
from app.common.mixins import BaseMixin


class Client(Base, BaseMixin):
    __tablename__ = "clients"

    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False)
    company = Column(String(200), nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String(50), nullable=True)
    tax_id = Column(String(50), nullable=True)  # EIN, NIT, VAT...
