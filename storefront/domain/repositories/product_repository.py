"""
Product Repository Interface.
Defines catalog-specific data access operations.
"""

from typing import Any, Dict, List, Optional

from storefront.domain.repositories.base import BaseRepository
from storefront.domain.models.product import Product
from storefront.domain.schemas.product import ProductFilter


class ProductRepository(BaseRepository[Product]):
    """Interface for Product-specific operations."""

    def get_with_filters(self, filters: ProductFilter) -> Dict[str, Any]:
        """Filtered, sorted, paginated listing plus the total match count."""
        ...

    def get_detail(self, id: int) -> Optional[Product]:
        """Get one product with category, location and images loaded."""
        ...

    def get_for_update(self, id: int) -> Optional[Product]:
        """Get one product, locking its row until the transaction ends."""
        ...

    def get_recent(self, limit: int = 5, location_id: Optional[int] = None) -> List[Product]:
        """Most recently created products."""
        ...
