# online_forms/routes/applications.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from online_forms.database import get_db
from online_forms.models.enums import ApplicationCategory
from online_forms.schemas.application import ApplicationDetail, ApplicationResponse
from online_forms.services import catalog_service
from online_forms.utils.pagination import pagination_meta
from online_forms.utils.responses import success_response

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("")
def list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[ApplicationCategory] = None,
    sort_by: str = Query("created_at"),
    sort_order: str = Query("DESC"),
    db: Session = Depends(get_db)
):
    rows, total = catalog_service.list_applications(
        db, page, limit, category.value if category else None, sort_by, sort_order
    )
    return success_response({
        "applications": [ApplicationResponse.model_validate(a) for a in rows],
        "pagination": pagination_meta(page, limit, total, with_links=True),
    })


@router.get("/search")
def search_applications(
    q: Optional[str] = Query(None, min_length=1, max_length=100),
    category: Optional[ApplicationCategory] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    rows, total = catalog_service.search_applications(
        db, page, limit, q, category.value if category else None
    )
    return success_response({
        "applications": [ApplicationResponse.model_validate(a) for a in rows],
        "search_query": q,
        "pagination": pagination_meta(page, limit, total),
    })


@router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    return success_response({"categories": catalog_service.list_categories(db)})


@router.get("/{application_id}")
def get_application(application_id: str, db: Session = Depends(get_db)):
    application = catalog_service.get_active_application(db, application_id)
    return success_response({"application": ApplicationDetail.model_validate(application)})
