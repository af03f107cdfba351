# tariffmarket/models/tariff_subscription.py

from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from tariffmarket.database import Base


class TariffSubscription(Base):
    __tablename__ = "tbtariff_subscriptions"

    tsu_id =                    Column(Integer, primary_key=True, index=True)
    tsu_customer_id =           Column(Integer, ForeignKey("tbcustomers.cus_id", ondelete="CASCADE"), nullable=False)
    tsu_tariff_id =             Column(Integer, ForeignKey("tbtariffs.trf_id"), nullable=False, index=True)
    tsu_customers_committed =   Column(Integer, nullable=False, default=0)

    customer = relationship("Customer", back_populates="subscriptions")
    tariff = relationship("Tariff", lazy="joined")

    __table_args__ = (
        UniqueConstraint("tsu_customer_id", "tsu_tariff_id", name="uq_subscription_customer_tariff"),
        CheckConstraint("tsu_customers_committed >= 0", name="check_committed_non_negative"),
    )

    @property
    def customers_committed(self) -> int:
        return self.tsu_customers_committed or 0

    def subscribe(self, count: int) -> None:
        self.tsu_customers_committed = self.customers_committed + count

    def unsubscribe(self, count: int) -> int:
        """Resta clientes comprometidos sin bajar de cero; devuelve cuántos salieron."""
        removed = min(count, self.customers_committed)
        self.tsu_customers_committed = self.customers_committed - removed
        return removed
