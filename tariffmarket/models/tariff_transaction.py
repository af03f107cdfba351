from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship

from tariffmarket.database import Base
from .enums import TariffTransactionType

class TariffTransaction(Base):
    __tablename__ = "tbtariff_transactions"

    ttx_id =            Column(Integer, primary_key=True, index=True)
    ttx_type =          Column(Enum(TariffTransactionType), nullable=False, index=True)
    ttx_tariff_id =     Column(Integer, ForeignKey("tbtariffs.trf_id"), nullable=False, index=True)
    ttx_broker =        Column(String(100), nullable=False)
    ttx_charge =        Column(Float, nullable=False, default=0.0)
    ttx_posted_at =     Column(DateTime, nullable=False)

    tariff = relationship("Tariff")
