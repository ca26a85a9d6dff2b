"""Products API routes: catalog, admin CRUD, promotions and images."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from storefront.application.services import image_service, product_service
from storefront.application.services.image_service import IncomingImage
from storefront.config import get_settings
from storefront.domain.models.user import User
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.schemas.base import MessageResponse
from storefront.domain.schemas.product import (
    ImageUrlsCreate,
    MainImageResponse,
    ProductCreate,
    ProductDetail,
    ProductFilter,
    ProductImageDeleteResponse,
    ProductImageRead,
    ProductImagesResponse,
    ProductListResponse,
    ProductUpdate,
    PromotionToggle,
    SortDirection,
    SortField,
)
from storefront.infrastructure.storage import ImageStorage
from storefront.interfaces.api.deps import require_admin
from storefront.interfaces.deps import get_image_storage, get_product_repository

router = APIRouter(prefix="/api/products", tags=["Products"])


def product_filters(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    location_id: Optional[int] = Query(None, alias="locationId"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    search: Optional[str] = Query(None, max_length=200),
    sort_by: SortField = Query("createdAt", alias="sortBy"),
    order_by: SortDirection = Query("desc", alias="orderBy"),
) -> ProductFilter:
    return ProductFilter(
        category_id=category_id,
        location_id=location_id,
        min_price=min_price,
        max_price=max_price,
        search=search.strip() if search else None,
        sort_by=sort_by,
        order_by=order_by,
        page=page,
        limit=limit,
    )


def _detail(repo: ProductRepository, product_id: int) -> ProductDetail:
    return ProductDetail.model_validate(product_service.get_product(repo, product_id))


@router.get("", response_model=ProductListResponse)
def list_products(
    filters: ProductFilter = Depends(product_filters),
    repo: ProductRepository = Depends(get_product_repository),
):
    return product_service.get_products(repo, filters)


@router.get("/my-products", response_model=ProductListResponse)
def list_my_products(
    filters: ProductFilter = Depends(product_filters),
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    return product_service.get_location_products(repo, user, filters)


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(product_id: int, repo: ProductRepository = Depends(get_product_repository)):
    return _detail(repo, product_id)


@router.post("", response_model=ProductDetail, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    return product_service.create_product(repo, user, body)


@router.put("/{product_id}", response_model=ProductDetail)
def update_product(
    product_id: int,
    body: ProductUpdate,
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    return product_service.update_product(repo, user, product_id, body)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    repo: ProductRepository = Depends(get_product_repository),
    storage: ImageStorage = Depends(get_image_storage),
    user: User = Depends(require_admin),
):
    product_service.delete_product(repo, user, product_id, storage)
    return MessageResponse(message="Product removed")


@router.patch("/{product_id}/toggle-promotion", response_model=ProductDetail)
def toggle_promotion(
    product_id: int,
    body: PromotionToggle,
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    return product_service.toggle_promotion(repo, user, product_id, body)


@router.post("/{product_id}/images", response_model=ProductImagesResponse, status_code=status.HTTP_201_CREATED)
async def upload_product_images(
    product_id: int,
    images: List[UploadFile] = File(...),
    repo: ProductRepository = Depends(get_product_repository),
    storage: ImageStorage = Depends(get_image_storage),
    user: User = Depends(require_admin),
):
    # One byte past the limit is enough for validate_uploads to reject the file
    read_limit = get_settings().MAX_IMAGE_SIZE_BYTES + 1
    incoming = []
    for upload in images:
        incoming.append(
            IncomingImage(
                filename=upload.filename,
                content_type=upload.content_type,
                content=await upload.read(read_limit),
            )
        )

    _, created = image_service.upload_images(repo, user, product_id, incoming, storage)
    return ProductImagesResponse(
        message=f"{len(created)} image(s) uploaded",
        images=[ProductImageRead.model_validate(i) for i in created],
        product=_detail(repo, product_id),
    )


@router.post("/{product_id}/images/urls", response_model=ProductImagesResponse, status_code=status.HTTP_201_CREATED)
def add_product_image_urls(
    product_id: int,
    body: ImageUrlsCreate,
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    _, created = image_service.attach_images(repo, user, product_id, body.image_urls)
    return ProductImagesResponse(
        message=f"{len(created)} image(s) added",
        images=[ProductImageRead.model_validate(i) for i in created],
        product=_detail(repo, product_id),
    )


@router.patch("/{product_id}/images/{image_id}/main", response_model=MainImageResponse)
def set_main_image(
    product_id: int,
    image_id: int,
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    _, image = image_service.set_main_image(repo, user, product_id, image_id)
    return MainImageResponse(
        message="Main image updated",
        image=ProductImageRead.model_validate(image),
        product=_detail(repo, product_id),
    )


@router.delete("/{product_id}/images/{image_id}", response_model=ProductImageDeleteResponse)
def delete_product_image(
    product_id: int,
    image_id: int,
    repo: ProductRepository = Depends(get_product_repository),
    storage: ImageStorage = Depends(get_image_storage),
    user: User = Depends(require_admin),
):
    image_service.delete_image(repo, user, product_id, image_id, storage)
    return ProductImageDeleteResponse(message="Image removed", product=_detail(repo, product_id))
