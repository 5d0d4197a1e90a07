from typing import List, Optional, Union

import pytz

from logger_manager import log_debug
from . import models
from interfaces.productModels import Product, ProductInsert, validate_insert_payload
from services.storage import ProductStorage, utc_now


class ProductRepository(ProductStorage):
    """SQLAlchemy-backed product store, used when DATABASE_URL is set."""

    def __init__(self, session_factory, clock=utc_now):
        self.session_factory = session_factory
        self._clock = clock

    def get(self, product_id: int) -> Optional[Product]:
        with self.session_factory() as db:
            db_product = db.get(models.Product, product_id)
            return self._to_product(db_product) if db_product else None

    def list_all(self) -> List[Product]:
        with self.session_factory() as db:
            rows = db.query(models.Product)\
                .order_by(models.Product.created_at.desc(), models.Product.id.asc())\
                .all()
            return [self._to_product(row) for row in rows]

    def create(self, payload: Union[ProductInsert, dict]) -> Product:
        insert = validate_insert_payload(payload)
        db_product = models.Product(
            name=insert.name,
            brand=insert.brand,
            category=insert.category,
            ingredients=[i.model_dump(by_alias=True) for i in insert.ingredients],
            usage_instructions=insert.usage_instructions,
            warnings=insert.warnings,
            expiry_date=insert.expiry_date,
            time_left=insert.time_left,
            recommended_for=insert.recommended_for,
            not_recommended_for=insert.not_recommended_for,
            user_sentiment=insert.user_sentiment.model_dump(by_alias=True),
            image_url=insert.image_url,
            created_at=self._clock(),
        )
        with self.session_factory() as db:
            db.add(db_product)
            db.commit()
            db.refresh(db_product)
            log_debug(f"Stored product {db_product.id}: {db_product.name}")
            return self._to_product(db_product)

    def delete(self, product_id: int) -> bool:
        with self.session_factory() as db:
            db_product = db.get(models.Product, product_id)
            if not db_product:
                return False
            db.delete(db_product)
            db.commit()
            log_debug(f"Deleted product {product_id}")
            return True

    @staticmethod
    def _to_product(db_product: models.Product) -> Product:
        created_at = db_product.created_at
        # SQLite hands back naive datetimes
        if created_at.tzinfo is None:
            created_at = pytz.utc.localize(created_at)
        return Product(
            id=db_product.id,
            name=db_product.name,
            brand=db_product.brand,
            category=db_product.category,
            ingredients=db_product.ingredients,
            usage_instructions=db_product.usage_instructions,
            warnings=db_product.warnings,
            expiry_date=db_product.expiry_date,
            time_left=db_product.time_left,
            recommended_for=db_product.recommended_for,
            not_recommended_for=db_product.not_recommended_for,
            user_sentiment=db_product.user_sentiment,
            image_url=db_product.image_url,
            created_at=created_at,
        )
