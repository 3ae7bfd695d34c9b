import logging
import os
import uuid

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


def file_size(file) -> int:
    """Size in bytes of an incoming FileStorage, leaving the stream rewound."""
    stream = file.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def save_file(file, upload_folder):
    """
    Store an uploaded file under a random name.

    Returns (storage_key, url). The storage key is the name on disk and
    the url is what the public /uploads route serves.
    """
    filename = secure_filename(file.filename or "")
    ext = filename.rsplit(".", 1)[1].lower() if "." in filename else ""
    storage_key = f"{uuid.uuid4().hex}.{ext}" if ext else uuid.uuid4().hex

    os.makedirs(upload_folder, exist_ok=True)
    file_path = os.path.join(upload_folder, storage_key)

    file.save(file_path)

    return storage_key, f"{UPLOAD_URL_PREFIX}/{storage_key}"


def delete_file(storage_key, upload_folder):
    """
    Deletes a stored file given its storage key.
    Missing files are not an error.
    """
    if not storage_key:
        return False

    file_path = os.path.join(upload_folder, os.path.basename(storage_key))

    if os.path.exists(file_path):
        try:
            os.remove(file_path)
            return True
        except OSError as e:
            logger.error("Failed to delete file %s: %s", file_path, e)
            return False
    return False
