from sqlalchemy import Column, Integer, String, Enum
from sqlalchemy.orm import relationship

from tariffmarket.database import Base
from .enums import PowerType

class Customer(Base):
    __tablename__ = "tbcustomers"

    cus_id =            Column(Integer, primary_key=True, index=True)
    cus_name =          Column(String(100), nullable=False, unique=True)
    cus_power_type =    Column(Enum(PowerType), nullable=False, default=PowerType.CONSUMPTION)
    cus_population =    Column(Integer, nullable=False, default=1)

    subscriptions = relationship("TariffSubscription", back_populates="customer", cascade="all, delete-orphan")
