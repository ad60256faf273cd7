# app/repos/product_repo.py
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(self) -> List[ProductModel]:
        return list(
            self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars().all()
        )

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product_id: int) -> int:
        result = self.db.execute(delete(ProductModel).where(ProductModel.id == product_id))
        self.db.commit()
        return result.rowcount
