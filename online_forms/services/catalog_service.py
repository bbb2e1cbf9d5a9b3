# online_forms/services/catalog_service.py
import logging
from typing import List, Optional

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from online_forms.models.application import Application
from online_forms.models.form_field import FormField
from online_forms.models.user import User
from online_forms.schemas.application import ApplicationCreate, ApplicationUpdate, FormFieldCreate
from online_forms.utils.errors import NotFoundError
from online_forms.utils.pagination import order_clause, paginate

logger = logging.getLogger(__name__)

CATALOG_SORT_FIELDS = {"created_at", "title", "priority", "estimated_time"}
ADMIN_SORT_FIELDS = CATALOG_SORT_FIELDS | {"updated_at", "category", "processing_fee"}

URL_FIELDS = ("image_url", "tutorial_url", "redirect_url")
NULLABLE_FIELDS = {"image_url", "tutorial_url", "processing_fee", "estimated_time", "requirements"}


def _active():
    return Application.is_active == True  # noqa: E712


def _escape_like(text: str) -> str:
    """Make % and _ in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_applications(db: Session, page: int, limit: int, category: Optional[str] = None,
                      sort_by: str = "created_at", sort_order: str = "DESC"):
    query = db.query(Application).options(selectinload(Application.form_fields)).filter(_active())
    if category:
        query = query.filter(Application.category == category)
    query = query.order_by(order_clause(Application, sort_by, sort_order, CATALOG_SORT_FIELDS, "created_at"))
    return paginate(query, page, limit)


def search_applications(db: Session, page: int, limit: int, q: Optional[str] = None,
                        category: Optional[str] = None):
    """Title/description substring match, or an exact tag match."""
    query = db.query(Application).options(selectinload(Application.form_fields)).filter(_active())
    if q:
        needle = _escape_like(q)
        pattern = f"%{needle}%"
        query = query.filter(or_(
            Application.title.ilike(pattern, escape="\\"),
            Application.description.ilike(pattern, escape="\\"),
            # JSON arrays serialise as ["a", "b"], so a quoted needle matches one whole tag
            cast(Application.tags, String).ilike(f'%"{needle}"%', escape="\\"),
        ))
    if category:
        query = query.filter(Application.category == category)
    query = query.order_by(Application.priority.desc(), Application.created_at.desc())
    return paginate(query, page, limit)


def get_active_application(db: Session, application_id: str) -> Application:
    application = db.query(Application).options(
        selectinload(Application.form_fields),
        joinedload(Application.creator)
    ).filter(
        Application.id == application_id,
        _active()
    ).first()
    if not application:
        raise NotFoundError("Application not found")
    return application


def list_categories(db: Session) -> List[str]:
    rows = db.query(Application.category).filter(_active()).group_by(Application.category).all()
    return [row[0] for row in rows]


# Admin management

def admin_list_applications(db: Session, page: int, limit: int, category: Optional[str] = None,
                            is_active: Optional[bool] = None, sort_by: str = "created_at",
                            sort_order: str = "DESC"):
    query = db.query(Application).options(
        selectinload(Application.form_fields),
        joinedload(Application.creator)
    )
    if category:
        query = query.filter(Application.category == category)
    if is_active is not None:
        query = query.filter(Application.is_active == is_active)
    query = query.order_by(order_clause(Application, sort_by, sort_order, ADMIN_SORT_FIELDS, "created_at"))
    return paginate(query, page, limit)


def _build_fields(fields: List[FormFieldCreate]) -> List[FormField]:
    built = []
    for index, field in enumerate(fields):
        values = field.model_dump()
        values["field_type"] = field.field_type.value
        # An explicit 0 is kept; only a missing order falls back to the position
        if values.get("order") is None:
            values["order"] = index
        built.append(FormField(**values))
    return built


def _column_values(data: dict) -> dict:
    for key in URL_FIELDS:
        if data.get(key) is not None:
            data[key] = str(data[key])
    if data.get("category") is not None:
        data["category"] = data["category"].value
    return data


def create_application(db: Session, admin: User, payload: ApplicationCreate) -> Application:
    data = _column_values(payload.model_dump(exclude={"form_fields"}))
    application = Application(**data, created_by=admin.id)
    application.form_fields = _build_fields(payload.form_fields)

    db.add(application)
    db.commit()
    db.refresh(application)
    logger.info(f"✅ Application '{application.title}' created by {admin.email}")
    return application


def get_application(db: Session, application_id: str) -> Application:
    application = db.query(Application).options(
        selectinload(Application.form_fields),
        joinedload(Application.creator)
    ).filter(Application.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found")
    return application


def update_application(db: Session, application_id: str, payload: ApplicationUpdate) -> Application:
    application = get_application(db, application_id)

    data = _column_values(payload.model_dump(exclude_unset=True, exclude={"form_fields"}))
    for key, value in data.items():
        if value is None and key not in NULLABLE_FIELDS:
            continue
        setattr(application, key, value)

    if payload.form_fields is not None:
        application.form_fields = _build_fields(payload.form_fields)

    db.commit()
    db.refresh(application)
    logger.info(f"Application '{application.title}' updated ({', '.join(data) or 'form fields'})")
    return application


def deactivate_application(db: Session, application_id: str) -> Application:
    """Soft delete: submissions keep pointing at the row."""
    application = get_application(db, application_id)
    application.is_active = False
    db.commit()
    logger.info(f"🗑️ Application '{application.title}' deactivated")
    return application
