import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Union

import pytz

from interfaces.productModels import Product, ProductInsert, validate_insert_payload
from logger_manager import log_debug


def utc_now() -> datetime:
    return datetime.now(tz=pytz.utc)


class ProductStorage(ABC):
    """Contract every product store implements."""

    @abstractmethod
    def get(self, product_id: int) -> Optional[Product]:
        ...

    @abstractmethod
    def list_all(self) -> List[Product]:
        ...

    @abstractmethod
    def create(self, payload: Union[ProductInsert, dict]) -> Product:
        ...

    @abstractmethod
    def delete(self, product_id: int) -> bool:
        ...


class MemStorage(ProductStorage):
    """
    Process-scoped product store. Nothing is persisted, a restart loses
    every product. Ids start at 1 and are never reused, even after deletes.
    """

    def __init__(self, clock=utc_now):
        self._products: Dict[int, Product] = {}
        self._next_id = 1
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def list_all(self) -> List[Product]:
        with self._lock:
            products = list(self._products.values())
        # sorted() is stable, equal timestamps keep insertion order
        return sorted(products, key=lambda p: p.created_at, reverse=True)

    def create(self, payload: Union[ProductInsert, dict]) -> Product:
        insert = validate_insert_payload(payload)
        with self._lock:
            product_id = self._next_id
            self._next_id += 1
            product = Product(**insert.model_dump(), id=product_id, created_at=self._clock())
            self._products[product_id] = product
        log_debug(f"Stored product {product_id}: {product.name}")
        return product

    def delete(self, product_id: int) -> bool:
        with self._lock:
            removed = self._products.pop(product_id, None)
        if removed is not None:
            log_debug(f"Deleted product {product_id}")
        return removed is not None

    def __len__(self) -> int:
        return len(self._products)
