from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from env import MAX_FILE_SIZE_MB, MAX_UPLOAD_FILES
from routers.deps import get_product_service
from services.product_service import ProductService
from utils import presentation_utils as present

BASE_DIR = Path(__file__).resolve().parent.parent

# Define the templates directory
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
templates.env.globals.update(
    safety_badge_class=present.safety_badge_class,
    safety_icon=present.safety_icon,
    overall_safety=present.overall_safety,
    ingredient_preview=present.ingredient_preview,
    hidden_ingredient_count=present.hidden_ingredient_count,
    expiry_status=present.expiry_status,
)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def dashboard(request: Request, compare: Optional[str] = None, service: ProductService = Depends(get_product_service)):
    products = service.list_products()
    selected = present.select_for_comparison(products, present.parse_compare_ids(compare))

    return templates.TemplateResponse(request, "dashboard.html", {
        "products": products,
        # a comparison needs at least two products
        "comparison": selected if len(selected) >= 2 else [],
        "selected_ids": [p.id for p in selected],
        "max_files": MAX_UPLOAD_FILES,
        "max_file_size_mb": MAX_FILE_SIZE_MB,
        "max_compare": present.MAX_COMPARE_PRODUCTS,
    })
