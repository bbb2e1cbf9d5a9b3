import os
import tempfile

# Settings are read at import time, so the environment is fixed before the app loads
_TMP_DIR = tempfile.mkdtemp(prefix="online_forms_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-access-secret"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"

import hashlib  # noqa: E402
import hmac  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from online_forms.database import Base, SessionLocal, engine  # noqa: E402
from online_forms.main import app  # noqa: E402
from online_forms.models.application import Application  # noqa: E402
from online_forms.models.form_field import FormField  # noqa: E402
from online_forms.models.user import User  # noqa: E402
from online_forms.services import email_service  # noqa: E402
from online_forms.services.gateway import GatewayError, RazorpayGateway, get_payment_gateway  # noqa: E402
from online_forms.utils.hash import hash_password  # noqa: E402
from online_forms.utils.jwt_handler import create_access_token  # noqa: E402

API = "/api/v1"
GATEWAY_SECRET = "rzp_test_secret"


class FakeGateway(RazorpayGateway):
    """Real signature checks, canned order/payment responses, no network."""

    def __init__(self):
        super().__init__(key_id="rzp_test_key", key_secret=GATEWAY_SECRET)
        self.orders = []
        self.payment_status = "captured"
        self.fail_orders = False
        self.fail_fetch = False
        # gateway payment id -> order it was captured against
        self.payment_orders = {}

    def create_order(self, amount, currency, receipt, notes):
        if self.fail_orders:
            raise GatewayError("Gateway unreachable: connection refused")
        order = {"id": f"order_test_{len(self.orders) + 1}", "amount": amount, "currency": currency}
        self.orders.append({"amount": amount, "currency": currency, "receipt": receipt, "notes": notes})
        return order

    def verify_signature(self, gateway_order_id, gateway_payment_id, signature):
        valid = super().verify_signature(gateway_order_id, gateway_payment_id, signature)
        if valid:
            self.payment_orders.setdefault(gateway_payment_id, gateway_order_id)
        return valid

    def fetch_payment(self, gateway_payment_id):
        if self.fail_fetch:
            raise GatewayError("Gateway rejected the request (502)")
        return {
            "id": gateway_payment_id,
            "status": self.payment_status,
            "order_id": self.payment_orders.get(gateway_payment_id),
        }


def sign(order_id: str, payment_id: str, secret: str = GATEWAY_SECRET) -> str:
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def gateway():
    fake = FakeGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_payment_gateway, None)
    fake.close()


@pytest.fixture
def client(gateway):
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Every outgoing email lands here instead of an SMTP server."""
    outbox = []

    async def fake_send(message, subject, to_email):
        outbox.append({"subject": subject, "to": to_email, "body": message.body})
        return True

    monkeypatch.setattr(email_service, "send_email_with_retry", fake_send)
    return outbox


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


def make_user(db, email="user@mail.com", name="Test User", password="secret123", role="user", is_active=True):
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_application(db, creator, title="Passport Application", category="Government",
                     processing_fee=99.0, priority=5, tags=None, is_active=True,
                     allow_document_upload=True):
    application = Application(
        title=title,
        description=f"Apply for {title.lower()} online",
        category=category,
        redirect_url="https://example.gov/apply",
        processing_fee=processing_fee,
        estimated_time=30,
        priority=priority,
        tags=tags if tags is not None else ["passport", "identity"],
        is_active=is_active,
        allow_document_upload=allow_document_upload,
        created_by=creator.id,
    )
    application.form_fields = [
        FormField(label="Full Name", field_type="text", is_required=True, order=1),
        FormField(label="Date of Birth", field_type="date", is_required=True, order=0),
    ]
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


@pytest.fixture
def admin(db):
    return make_user(db, email="admin@onlineforms.com", name="Admin", password="admin123", role="admin")


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin.id)


@pytest.fixture
def user_headers(user):
    return auth_headers(user.id)


@pytest.fixture
def application(db, admin):
    return make_application(db, admin)
