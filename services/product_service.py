import asyncio
from typing import List, Union

from exceptions import NotFoundError, ProductInsightError, ValidationError
from interfaces.productModels import AnalyzeFailure, Product, analysis_to_insert
from logger_manager import log_error, log_info
from services.productAnalyzerAgent import ProductImageAnalyzer
from services.storage import ProductStorage
from utils.upload_utils import UploadedImage

# Load environment variables
from env import PARALLEL_RATE_LIMIT


class ProductService:
    def __init__(self, storage: ProductStorage, analyzer: ProductImageAnalyzer, parallel_limit: int = PARALLEL_RATE_LIMIT):
        self.storage = storage
        self.analyzer = analyzer
        self.parallel_limit = max(1, parallel_limit)

    def list_products(self) -> List[Product]:
        return self.storage.list_all()

    def get_product(self, product_id: int) -> Product:
        product = self.storage.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def delete_product(self, product_id: int) -> None:
        if not self.storage.delete(product_id):
            raise NotFoundError("Product not found")
        log_info(f"Product {product_id} deleted")

    def compare_products(self, product_ids: List[int]) -> List[Product]:
        if len(product_ids) < 2:
            raise ValidationError("At least 2 product IDs are required for comparison")

        products = [self.storage.get(product_id) for product_id in product_ids]
        valid_products = [p for p in products if p is not None]
        if len(valid_products) < 2:
            raise ValidationError("At least 2 valid products are required for comparison")
        return valid_products

    async def analyze_batch(self, images: List[UploadedImage]) -> List[Union[Product, AnalyzeFailure]]:
        """
        Analyze every image and persist each successful result.

        Images are processed concurrently up to `parallel_limit` at a time.
        The returned list matches the input order, and a failed image only
        produces an AnalyzeFailure for itself.
        """
        log_info(f"Starting analysis of {len(images)} images with rate limit {self.parallel_limit}")
        semaphore = asyncio.Semaphore(self.parallel_limit)

        async def run(image: UploadedImage):
            async with semaphore:
                return await self._analyze_one(image)

        results = await asyncio.gather(*(run(image) for image in images))
        failed = sum(1 for r in results if isinstance(r, AnalyzeFailure))
        log_info(f"Completed analysis batch: {len(results) - failed} succeeded, {failed} failed")
        return list(results)

    async def _analyze_one(self, image: UploadedImage) -> Union[Product, AnalyzeFailure]:
        try:
            analysis = await self.analyzer.analyze_image(image.data, image.content_type)
            product = self.storage.create(analysis_to_insert(analysis))
            log_info(f"Analyzed {image.filename} as product {product.id}: {product.name}")
            return product
        except ProductInsightError as e:
            log_error(f"Error analyzing image {image.filename}: {e}", e)
            return AnalyzeFailure(error=e.message, filename=image.filename)
        except Exception as e:
            log_error(f"Unexpected error analyzing image {image.filename}: {e}", e)
            return AnalyzeFailure(error="Failed to analyze image", filename=image.filename)
