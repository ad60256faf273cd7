# app/services/product_service.py
from typing import List

from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.errors import NotFoundError
from app.domain.schemas import ProductIn
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """Prosty CRUD katalogu produktow."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def list_products(self) -> List[ProductModel]:
        return self.repo.list_products()

    def create_product(self, payload: ProductIn) -> ProductModel:
        created = self.repo.create_product(
            ProductModel(
                name=payload.name,
                description=payload.description,
                price=payload.price,
            )
        )
        logger.info(f"Utworzono produkt {created.id} ({created.name})")
        return created

    def update_product(self, product_id: int, payload: ProductIn) -> ProductModel:
        product = self.get_product(product_id)
        product.name = payload.name
        product.description = payload.description
        product.price = payload.price
        return self.repo.save(product)

    def delete_product(self, product_id: int) -> None:
        if self.repo.delete_product(product_id) == 0:
            raise NotFoundError(f"Product {product_id} not found")
        logger.info(f"Usunieto produkt {product_id}")
