from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tariffmarket.models import Customer
from tariffmarket.core import logger

class CustomerRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_customer_by_id(self, cus_id: int) -> Customer | None:
        return self.db.get(Customer, cus_id)

    def get_customer_by_name(self, name: str) -> Customer | None:
        return self.db.query(Customer).filter(Customer.cus_name == name).first()

    def create_customer(self, new_customer: Customer) -> Customer | None:
        try:
            self.db.add(new_customer)
            self.db.commit()
            self.db.refresh(new_customer)
            logger.info(f"Cliente {new_customer.cus_name} creado")
            return new_customer
        except SQLAlchemyError as e:
            logger.error(f"No se pudo crear el cliente: {e}")
            self.db.rollback()
            return None
