from fastapi import Request

from services.product_service import ProductService


def get_product_service(request: Request) -> ProductService:
    """The service is built once by create_app() and kept on app.state."""
    return request.app.state.product_service
