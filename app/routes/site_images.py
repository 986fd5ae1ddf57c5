from botocore.exceptions import BotoCoreError, ClientError
from flask import Blueprint, jsonify, request, current_app
from app.services.storage_service import (
    SITE_IMAGE_KEYS,
    delete_site_image,
    get_site_images,
    upload_site_image,
)
from app.utils.auth_utils import token_required
from app.utils.s3_utils import S3ConfigError

site_images_bp = Blueprint("site_images", __name__, url_prefix="/api/site-images")


@site_images_bp.route("", methods=["GET"])
def list_site_images():
    """
    GET /api/site-images
    Purpose: Public URLs of the hero and about images, cache-busted.
    """
    return jsonify(get_site_images())


@site_images_bp.route("/<key>", methods=["PUT"])
@token_required("MANAGER")
def replace_site_image(key):
    """
    PUT /api/site-images/<key> (multipart/form-data, field 'image_file')
    Purpose: Replace one of barber1.jpg, barber2.jpg, barber3.jpg, about.jpg.
    """
    if key not in SITE_IMAGE_KEYS:
        return jsonify({"error": f"Unknown site image '{key}'"}), 404

    image_file = request.files.get("image_file")
    if not image_file:
        return jsonify({"error": "image_file is required"}), 400

    try:
        url = upload_site_image(key, image_file)
    except S3ConfigError as e:
        return jsonify({"error": "Server configuration error", "details": str(e)}), 500
    except (BotoCoreError, ClientError) as e:
        current_app.logger.error(f"Failed to upload site image {key}: {e}")
        return jsonify({"error": "File upload failed", "details": str(e)}), 500

    return jsonify({"message": "Image uploaded successfully", "key": key, "url": url})


@site_images_bp.route("/<key>", methods=["DELETE"])
@token_required("MANAGER")
def remove_site_image(key):
    if key not in SITE_IMAGE_KEYS:
        return jsonify({"error": f"Unknown site image '{key}'"}), 404

    try:
        delete_site_image(key)
    except S3ConfigError as e:
        return jsonify({"error": "Server configuration error", "details": str(e)}), 500
    except (BotoCoreError, ClientError) as e:
        current_app.logger.error(f"Failed to delete site image {key}: {e}")
        return jsonify({"error": "File delete failed", "details": str(e)}), 500

    return jsonify({"message": "Image deleted", "key": key})
