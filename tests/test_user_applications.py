import asyncio
import os

import pytest
from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError

from conftest import API, auth_headers, make_application, make_user
from online_forms.config import settings
from online_forms.models.document import Document
from online_forms.models.user_application import UserApplication
from online_forms.routes.user_applications import submit_form as submit_form_route
from online_forms.schemas.user_application import SubmitFormRequest
from online_forms.services import email_service
from online_forms.utils.tracking import is_valid_tracking_number

FORM_DATA = {"Full Name": "Jane Doe", "Date of Birth": "1990-01-01"}


def submit_form(client, headers, application_id, form_data=None):
    return client.post(
        f"{API}/user-applications/submit-form",
        json={"application_id": application_id, "form_data": form_data or FORM_DATA},
        headers=headers,
    )


def submit_documents(client, headers, application_id):
    return client.post(
        f"{API}/user-applications/upload-documents",
        json={"application_id": application_id},
        headers=headers,
    )


def test_submit_form_creates_pending_submission(client, application, user, user_headers, sent_emails):
    response = submit_form(client, user_headers, application.id)
    assert response.status_code == 201
    data = response.json()["data"]["application"]
    assert data["status"] == "pending"
    assert data["submission_type"] == "form"
    assert data["form_data"] == FORM_DATA
    assert is_valid_tracking_number(data["tracking_number"])
    assert data["application"]["title"] == "Passport Application"

    assert sent_emails[-1]["to"] == user.email
    assert data["tracking_number"] in sent_emails[-1]["body"]


def test_submit_twice_is_conflict(client, db, application, user_headers):
    assert submit_form(client, user_headers, application.id).status_code == 201
    second = submit_form(client, user_headers, application.id)
    assert second.status_code == 409
    assert second.json()["message"] == "You have already submitted this application"

    # Document submissions share the one-per-application rule
    third = submit_documents(client, user_headers, application.id)
    assert third.status_code == 409
    assert db.query(UserApplication).count() == 1


def test_unique_constraint_guards_the_pair(db, application, user):
    db.add(UserApplication(user_id=user.id, application_id=application.id, submission_type="form"))
    db.commit()
    db.add(UserApplication(user_id=user.id, application_id=application.id, submission_type="form"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_different_users_may_submit_same_application(client, db, application, user_headers):
    other = make_user(db, email="other@mail.com")
    assert submit_form(client, user_headers, application.id).status_code == 201
    assert submit_form(client, auth_headers(other.id), application.id).status_code == 201


def test_submit_to_inactive_or_missing_application(client, db, admin, user_headers):
    hidden = make_application(db, admin, is_active=False)
    response = submit_form(client, user_headers, hidden.id)
    assert response.status_code == 404
    assert response.json()["message"] == "Application not found or inactive"

    missing = submit_form(client, user_headers, "6f1c0f1e-8f0e-4a57-9d38-0f6f0c3e2a11")
    assert missing.status_code == 404


def test_submit_requires_authentication(client, application):
    response = client.post(
        f"{API}/user-applications/submit-form",
        json={"application_id": application.id, "form_data": FORM_DATA},
    )
    assert response.status_code == 401


def test_submit_documents(client, db, admin, application, user_headers):
    response = submit_documents(client, user_headers, application.id)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["application"]["submission_type"] == "document"
    assert data["application"]["amount_paid"] == 99.0
    assert data["processing_fee"] == 99.0
    assert data["requires_payment"] is True

    no_uploads = make_application(db, admin, title="Form Only", allow_document_upload=False)
    refused = submit_documents(client, user_headers, no_uploads.id)
    assert refused.status_code == 404
    assert refused.json()["message"] == "Application not found or does not allow document upload"


def test_upload_document(client, db, application, user_headers):
    submission_id = submit_documents(client, user_headers, application.id).json()["data"]["application"]["id"]

    response = client.post(
        f"{API}/user-applications/{submission_id}/documents",
        files={"file": ("passport.pdf", b"%PDF-1.4 test document", "application/pdf")},
        data={"document_type": "identity"},
        headers=user_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["document_count"] == 1
    assert data["document"]["original_name"] == "passport.pdf"
    assert data["document"]["file_url"].startswith(f"/uploads/{submission_id}/")

    stored = db.query(Document).one()
    assert os.path.isfile(os.path.join(settings.UPLOAD_DIR, submission_id, stored.file_name))

    detail = client.get(f"{API}/user-applications/{submission_id}", headers=user_headers).json()["data"]
    assert len(detail["application"]["documents"]) == 1


def test_upload_rejects_wrong_type_and_foreign_submission(client, db, application, user_headers):
    submission_id = submit_documents(client, user_headers, application.id).json()["data"]["application"]["id"]

    wrong_type = client.post(
        f"{API}/user-applications/{submission_id}/documents",
        files={"file": ("notes.txt", b"plain text", "text/plain")},
        headers=user_headers,
    )
    assert wrong_type.status_code == 400

    stranger = make_user(db, email="stranger@mail.com")
    foreign = client.post(
        f"{API}/user-applications/{submission_id}/documents",
        files={"file": ("passport.pdf", b"%PDF-1.4", "application/pdf")},
        headers=auth_headers(stranger.id),
    )
    assert foreign.status_code == 404


def test_upload_rejects_oversized_file(client, application, user_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 0)
    submission_id = submit_documents(client, user_headers, application.id).json()["data"]["application"]["id"]

    response = client.post(
        f"{API}/user-applications/{submission_id}/documents",
        files={"file": ("scan.png", b"\x89PNG data", "image/png")},
        headers=user_headers,
    )
    assert response.status_code == 400
    assert "limit" in response.json()["message"]


def test_list_and_get_are_scoped_to_owner(client, db, admin, application, user_headers):
    second = make_application(db, admin, title="Driving License")
    submit_form(client, user_headers, application.id)
    submit_form(client, user_headers, second.id)

    other = make_user(db, email="other@mail.com")
    other_id = submit_form(client, auth_headers(other.id), application.id).json()["data"]["application"]["id"]

    listing = client.get(f"{API}/user-applications", headers=user_headers).json()["data"]
    assert listing["pagination"]["total_items"] == 2

    assert client.get(f"{API}/user-applications/{other_id}", headers=user_headers).status_code == 404

    filtered = client.get(
        f"{API}/user-applications", params={"status": "completed"}, headers=user_headers
    ).json()["data"]
    assert filtered["applications"] == []


def test_owner_can_edit_and_delete_only_while_pending(client, db, application, user_headers):
    submission_id = submit_form(client, user_headers, application.id).json()["data"]["application"]["id"]

    updated = client.put(
        f"{API}/user-applications/{submission_id}",
        json={"form_data": {"Full Name": "Jane Q. Doe"}},
        headers=user_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["application"]["form_data"] == {"Full Name": "Jane Q. Doe"}

    submission = db.query(UserApplication).filter(UserApplication.id == submission_id).one()
    submission.status = "inProgress"
    db.commit()

    edit = client.put(
        f"{API}/user-applications/{submission_id}",
        json={"form_data": {"Full Name": "Changed"}},
        headers=user_headers,
    )
    assert edit.status_code == 404
    assert edit.json()["message"] == "Application not found or cannot be edited"

    delete = client.delete(f"{API}/user-applications/{submission_id}", headers=user_headers)
    assert delete.status_code == 404
    assert delete.json()["message"] == "Application not found or cannot be deleted"


def test_delete_pending_submission_removes_documents(client, db, application, user_headers):
    submission_id = submit_documents(client, user_headers, application.id).json()["data"]["application"]["id"]
    client.post(
        f"{API}/user-applications/{submission_id}/documents",
        files={"file": ("passport.pdf", b"%PDF-1.4", "application/pdf")},
        headers=user_headers,
    )

    response = client.delete(f"{API}/user-applications/{submission_id}", headers=user_headers)
    assert response.status_code == 200
    assert db.query(UserApplication).count() == 0
    assert db.query(Document).count() == 0
    assert not os.path.exists(os.path.join(settings.UPLOAD_DIR, submission_id))

    # The pair is free again once the submission is gone
    assert submit_form(client, user_headers, application.id).status_code == 201


def test_stored_extension_follows_content_type(client, application, user_headers):
    submission_id = submit_documents(client, user_headers, application.id).json()["data"]["application"]["id"]

    response = client.post(
        f"{API}/user-applications/{submission_id}/documents",
        files={"file": ("evil.html", b"<script>alert(1)</script>", "image/png")},
        headers=user_headers,
    )
    assert response.status_code == 201
    document = response.json()["data"]["document"]
    assert document["original_name"] == "evil.html"
    assert document["file_url"].endswith(".png")

    served = client.get(document["file_url"])
    assert served.status_code == 200
    assert served.headers["content-type"] == "image/png"


def test_confirmation_email_is_queued_after_the_response(db, application, user, sent_emails):
    tasks = BackgroundTasks()
    request = SubmitFormRequest(application_id=application.id, form_data=FORM_DATA)

    submit_form_route(request, tasks, user, db)
    assert sent_emails == []
    assert tasks.tasks[0].func is email_service.notify

    asyncio.run(tasks())
    assert sent_emails[-1]["to"] == user.email
