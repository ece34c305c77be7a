# campsite/utils/media.py
"""
Blob storage on the local upload folder.

Files land under ``UPLOAD_FOLDER/<folder>/<timestamp>-<random>.<ext>`` and are
addressed by ``MEDIA_URL_PREFIX/<folder>/<name>``. Only URLs under that prefix
are ever touched on delete.
"""
import os
import secrets
import time

from werkzeug.utils import secure_filename
from flask import current_app

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
FILE_EXTENSIONS = {"zip"}


def file_extension(filename):
    filename = secure_filename(filename or "")
    if "." not in filename:
        return None
    return filename.rsplit(".", 1)[1].lower()


def allowed_file(filename, extensions):
    return file_extension(filename) in extensions


def upload_root():
    folder = current_app.config.get("UPLOAD_FOLDER", "uploads")
    if not os.path.isabs(folder):
        folder = os.path.join(current_app.root_path, folder)
    return folder


def media_prefix():
    return current_app.config.get("MEDIA_URL_PREFIX", "/uploads").rstrip("/")


def _file_size(file):
    stream = file.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def save_file(file, *, folder, extensions, max_bytes=None):
    if not file or not file.filename:
        raise ValueError("No file provided")

    if not allowed_file(file.filename, extensions):
        raise ValueError("File type not allowed")

    if max_bytes is not None and _file_size(file) > max_bytes:
        raise ValueError("File is too large")

    ext = file_extension(file.filename)
    unique_filename = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"
    parts = [secure_filename(part) for part in folder.split("/") if part]
    relative = "/".join(parts + [unique_filename])

    file_path = os.path.join(upload_root(), *relative.split("/"))
    os.makedirs(os.path.dirname(file_path), exist_ok=True)
    file.save(file_path)

    return f"{media_prefix()}/{relative}"


def media_path(file_url):
    """Local path of a media URL, or None for URLs this store does not own."""
    prefix = media_prefix() + "/"
    if not file_url or not file_url.startswith(prefix):
        return None

    root = os.path.realpath(upload_root())
    file_path = os.path.realpath(os.path.join(root, *file_url[len(prefix):].split("/")))
    if not file_path.startswith(root + os.sep):
        return None
    return file_path


def delete_file(file_url):
    """
    Deletes a file given its URL.
    Foreign URLs and files that are already gone are a no-op (False).
    """
    file_path = media_path(file_url)
    if file_path is None:
        current_app.logger.info(f"Skipping delete of foreign media URL {file_url}")
        return False

    if not os.path.exists(file_path):
        return False

    try:
        os.remove(file_path)
    except OSError as e:
        current_app.logger.error(f"Failed to delete file {file_path}: {e}")
        raise
    return True
