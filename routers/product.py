import re
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from exceptions import FieldError, InternalError, ProductInsightError, ValidationError
from interfaces.productModels import AnalyzeResponse, CompareRequest, CompareResponse, MessageResponse, Product
from logger_manager import log_error, log_info
from routers.deps import get_product_service
from services.product_service import ProductService
from utils.upload_utils import read_uploaded_images

router = APIRouter()


PRODUCT_ID_PATTERN = re.compile(r"-?[0-9]+")


def parse_product_id(raw_id: str) -> int:
    # int() alone would also take " 7", "0_1" and non-ASCII digits
    if not PRODUCT_ID_PATTERN.fullmatch(raw_id or ""):
        raise ValidationError("Invalid product ID", [FieldError(field="id", message=f"Not an integer: {raw_id}")])
    return int(raw_id)


@router.get("", response_model=List[Product])
def list_products(service: ProductService = Depends(get_product_service)):
    try:
        return service.list_products()
    except ProductInsightError:
        raise
    except Exception as e:
        log_error(f"Error fetching products: {e}", e)
        raise InternalError("Failed to fetch products")


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_products(
    images: Optional[List[UploadFile]] = File(None),
    service: ProductService = Depends(get_product_service),
):
    """Analyze up to 10 product images; each file succeeds or fails on its own."""
    log_info(f"Analyze endpoint called with {len(images or [])} files")
    uploaded = await read_uploaded_images(images)
    results = await service.analyze_batch(uploaded)
    return AnalyzeResponse(results=results)


@router.post("/compare", response_model=CompareResponse)
def compare_products(request: CompareRequest, service: ProductService = Depends(get_product_service)):
    log_info(f"Compare endpoint called for ids {request.product_ids}")
    return CompareResponse(products=service.compare_products(request.product_ids))


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    return service.get_product(parse_product_id(product_id))


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    service.delete_product(parse_product_id(product_id))
    return MessageResponse(message="Product deleted successfully")
