# souq/services/product_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from souq.data.models.product import ProductModel
from souq.domain.errors import NotFoundError, ValidationError
from souq.domain.localization import localize
from souq.domain.schemas import ProductCreate
from souq.repos.product_repo import ProductRepo
from souq.utils.logging import get_logger

logger = get_logger(__name__)


def _view(product: ProductModel, lang: str) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "name_text": localize(product.name, lang),
        "description": product.description,
        "images": product.images or [],
        "variants": product.variants or [],
        "created_at": product.created_at,
    }


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def create_product(self, payload: ProductCreate, lang: str) -> Dict[str, Any]:
        if not payload.name.get("en"):
            raise ValidationError("Product name must include English text")

        # SKUs only need to be unique inside one product
        skus = [o.sku for v in payload.variants for o in v.options]
        if len(skus) != len(set(skus)):
            raise ValidationError("Duplicate SKU within product")

        data = payload.model_dump()
        product = self.repo.create_product(
            ProductModel(
                name=data["name"],
                description=data["description"],
                images=data["images"],
                variants=data["variants"],
            )
        )
        logger.info(f"Created product {product.id} with {len(skus)} variant options")
        return _view(product, lang)

    def get_product(self, product_id: int, lang: str) -> Dict[str, Any]:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return _view(product, lang)

    def list_products(self, lang: str, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
        return [_view(p, lang) for p in self.repo.list_products(limit=limit, offset=offset)]
