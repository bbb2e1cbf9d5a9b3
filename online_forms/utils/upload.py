# online_forms/utils/upload.py
import os
from uuid import uuid4

from fastapi import UploadFile

from online_forms.config import settings

ALLOWED_MIME_TYPES = {
    "application/pdf": "pdf",
    "image/jpeg": "jpg",
    "image/png": "png",
}


def save_upload(file: UploadFile, subfolder: str, content: bytes) -> tuple:
    """Write an uploaded file under UPLOAD_DIR/<subfolder>; returns (stored name, path)."""
    # content_type is already checked against ALLOWED_MIME_TYPES; the client filename is ignored
    ext = ALLOWED_MIME_TYPES[file.content_type]
    filename = f"{uuid4().hex}.{ext}"
    folder_path = os.path.join(settings.UPLOAD_DIR, subfolder)

    os.makedirs(folder_path, exist_ok=True)

    file_path = os.path.join(folder_path, filename)

    with open(file_path, "wb") as buffer:
        buffer.write(content)

    return filename, file_path


def remove_upload_folder(subfolder: str):
    folder_path = os.path.join(settings.UPLOAD_DIR, subfolder)
    if not os.path.isdir(folder_path):
        return
    for name in os.listdir(folder_path):
        os.remove(os.path.join(folder_path, name))
    os.rmdir(folder_path)
