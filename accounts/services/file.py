"""Profile image storage on local disk."""

import base64
import binascii
import logging
from pathlib import Path

from accounts.core.config import settings
from accounts.core.security import generate_token

logger = logging.getLogger(__name__)

# Leading bytes of the accepted image formats
_SIGNATURES = {
    b"\x89PNG\r\n\x1a\n": "png",
    b"\xff\xd8\xff": "jpeg",
}


def profile_folder() -> Path:
    return Path(settings.upload_dir) / settings.profile_dir


def create_folders() -> None:
    """Create the upload folder and the profile folder under it."""
    profile_folder().mkdir(parents=True, exist_ok=True)


def decode_image(image: str) -> bytes | None:
    """Decode a base64 image, accepting an optional data-URL prefix. None if not base64."""
    if image.startswith("data:") and "," in image:
        image = image.split(",", 1)[1]
    try:
        return base64.b64decode(image, validate=True)
    except (binascii.Error, ValueError):
        return None


def detect_image_type(data: bytes) -> str | None:
    for signature, kind in _SIGNATURES.items():
        if data.startswith(signature):
            return kind
    return None


def check_profile_image(image: str) -> str | None:
    """Return the message key of the broken image rule, or None."""
    data = decode_image(image)
    if data is None:
        return "unsupported_image_file"
    if len(data) > settings.max_image_size_bytes:
        return "profile_image_size"
    if detect_image_type(data) is None:
        return "unsupported_image_file"
    return None


def save_profile_image(image: str) -> str:
    """Write a base64 image to the profile folder under a random name and return the name."""
    data = decode_image(image)
    filename = generate_token()
    create_folders()
    (profile_folder() / filename).write_bytes(data)
    return filename


def delete_profile_image(filename: str | None) -> None:
    if not filename:
        return
    path = profile_folder() / filename
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("Profile image %s was already gone", filename)
