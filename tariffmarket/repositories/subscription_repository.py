# tariffmarket/repositories/subscription_repository.py

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tariffmarket.models import Customer, Tariff, TariffSubscription
from tariffmarket.core import logger


class TariffSubscriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_subscription(self, customer: Customer, tariff: Tariff) -> TariffSubscription | None:
        return (
            self.db.query(TariffSubscription)
            .filter(
                TariffSubscription.tsu_customer_id == customer.cus_id,
                TariffSubscription.tsu_tariff_id == tariff.trf_id,
            )
            .first()
        )

    def find_subscription_by_id(self, tsu_id: int) -> TariffSubscription | None:
        return self.db.get(TariffSubscription, tsu_id)

    def get_subscription(self, customer: Customer, tariff: Tariff) -> TariffSubscription:
        """Devuelve la suscripción única (cliente, tarifa), creándola vacía si no existe."""
        subscription = self.find_subscription(customer, tariff)
        if subscription is None:
            subscription = TariffSubscription(customer=customer, tariff=tariff, tsu_customers_committed=0)
            self.db.add(subscription)
            logger.info(f"Nueva suscripción: cliente {customer.cus_name} → tarifa {tariff.trf_id}")
        return subscription

    def find_subscriptions_for_tariff(self, tariff: Tariff) -> list[TariffSubscription]:
        return (
            self.db.query(TariffSubscription)
            .filter(TariffSubscription.tsu_tariff_id == tariff.trf_id)
            .order_by(TariffSubscription.tsu_id)
            .all()
        )

    def find_subscriptions_for_customer(self, customer: Customer) -> list[TariffSubscription]:
        return (
            self.db.query(TariffSubscription)
            .filter(TariffSubscription.tsu_customer_id == customer.cus_id)
            .order_by(TariffSubscription.tsu_id)
            .all()
        )

    def find_active_subscriptions_for_customer(self, customer: Customer) -> list[TariffSubscription]:
        return (
            self.db.query(TariffSubscription)
            .filter(
                TariffSubscription.tsu_customer_id == customer.cus_id,
                TariffSubscription.tsu_customers_committed > 0,
            )
            .order_by(TariffSubscription.tsu_id)
            .all()
        )

    def save(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"No se pudieron guardar las suscripciones: {e}")
            self.db.rollback()
            raise
