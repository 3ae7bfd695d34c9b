# flyover_cms/application/uploads/store_upload.py
from typing import Any, Dict, Optional

from flyover_cms.application.resources.service import ResourceService
from flyover_cms.application.settings.service import SettingsService
from flyover_cms.domain.exceptions import ValidationError
from flyover_cms.schemas.base import validate_payload
from flyover_cms.utils.media import delete_file, file_size, save_file

BYTES_PER_MB = 1024 * 1024


def store_upload(
    *,
    service: ResourceService,
    settings: SettingsService,
    file,
    upload_folder: str,
    actor_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Stores an uploaded file and records its metadata.

    Responsibilities:
    - type and size checks against the current site settings
    - writing the file to the upload folder
    - creating the upload record
    - removing the file again if the record cannot be written
    """

    if file is None or not file.filename:
        raise ValidationError.for_field("file", "No file provided")

    current = settings.get()

    # 1️⃣ Type check
    allowed_types = current.get("allowedFileTypes") or []
    if allowed_types and file.mimetype not in allowed_types:
        raise ValidationError.for_field(
            "file",
            f"File type {file.mimetype or 'unknown'} is not allowed",
        )

    # 2️⃣ Size check
    size = file_size(file)
    max_size_mb = current.get("maxFileSize") or 10
    if size > max_size_mb * BYTES_PER_MB:
        raise ValidationError.for_field(
            "file",
            f"File exceeds the maximum size of {max_size_mb} MB",
        )

    # 3️⃣ Write to disk
    storage_key, url = save_file(file, upload_folder)

    data = validate_payload(
        service.definition.schema,
        {
            "filename": storage_key,
            "originalName": file.filename,
            "mimeType": file.mimetype or "application/octet-stream",
            "size": size,
            "url": url,
            "storageKey": storage_key,
            "uploadedBy": actor_id or "",
        },
    )

    # 4️⃣ Record metadata
    try:
        return service.create_validated(data, actor_id=actor_id)
    except Exception:
        delete_file(storage_key, upload_folder)
        raise
