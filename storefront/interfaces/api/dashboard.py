"""Dashboard API: aggregated stats for the back-office."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.application.services.dashboard_service import get_dashboard_stats
from storefront.domain.models.user import User
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.schemas.dashboard import DashboardStats
from storefront.infrastructure.database import get_db
from storefront.interfaces.api.deps import require_admin
from storefront.interfaces.deps import get_product_repository

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    return get_dashboard_stats(db, repo, user)
