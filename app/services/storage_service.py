"""
Image storage on S3.

Site images live under fixed keys in the hero prefix; service images and
barber photos get generated '<timestamp_ms>-<filename>' keys. Public URLs
carry a '?t=<timestamp_ms>' suffix so browsers pick up replaced files.
"""
import time

from flask import current_app
from werkzeug.utils import secure_filename

from app.utils.s3_utils import (
    S3ConfigError,
    delete_file_from_s3,
    object_url,
    upload_file_to_s3,
)

SITE_IMAGE_KEYS = ("barber1.jpg", "barber2.jpg", "barber3.jpg", "about.jpg")


def _bucket():
    bucket_name = current_app.config.get("S3_BUCKET_NAME")
    if not bucket_name:
        current_app.logger.error("S3_BUCKET_NAME is not configured")
        raise S3ConfigError("S3_BUCKET_NAME is not configured")
    return bucket_name


def _timestamp_ms():
    return int(time.time() * 1000)


def public_url(prefix, key, timestamp=None):
    if not key:
        return None
    return f"{object_url(f'{prefix}/{key}')}?t={timestamp or _timestamp_ms()}"


def generated_key(filename):
    return f"{_timestamp_ms()}-{secure_filename(filename or 'upload')}"


def get_site_images():
    prefix = current_app.config["HERO_IMAGE_PREFIX"]
    timestamp = _timestamp_ms()
    return {key: public_url(prefix, key, timestamp) for key in SITE_IMAGE_KEYS}


def upload_site_image(key, file):
    if key not in SITE_IMAGE_KEYS:
        raise ValueError(f"Unknown site image '{key}'")

    prefix = current_app.config["HERO_IMAGE_PREFIX"]
    upload_file_to_s3(
        file, f"{prefix}/{key}", _bucket(), getattr(file, "mimetype", None)
    )
    current_app.logger.info(f"Site image {key} replaced")
    return public_url(prefix, key)


def delete_site_image(key):
    if key not in SITE_IMAGE_KEYS:
        raise ValueError(f"Unknown site image '{key}'")

    prefix = current_app.config["HERO_IMAGE_PREFIX"]
    return delete_file_from_s3(f"{prefix}/{key}", _bucket())


def upload_service_image(file):
    """Returns (image_key, public_url)."""
    prefix = current_app.config["SERVICE_IMAGE_PREFIX"]
    key = generated_key(getattr(file, "filename", None))
    upload_file_to_s3(
        file, f"{prefix}/{key}", _bucket(), getattr(file, "mimetype", None)
    )
    return key, public_url(prefix, key)


def service_image_url(image_key):
    return public_url(current_app.config["SERVICE_IMAGE_PREFIX"], image_key)


def delete_service_image(image_key):
    prefix = current_app.config["SERVICE_IMAGE_PREFIX"]
    return delete_file_from_s3(f"{prefix}/{image_key}", _bucket())


def upload_barber_photo(file):
    prefix = current_app.config["BARBER_IMAGE_PREFIX"]
    key = generated_key(getattr(file, "filename", None))
    upload_file_to_s3(
        file, f"{prefix}/{key}", _bucket(), getattr(file, "mimetype", None)
    )
    return public_url(prefix, key)
