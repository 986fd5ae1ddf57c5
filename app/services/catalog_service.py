# Service catalog: what the shop sells, with optional images in S3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import Service
from app.services.storage_service import delete_service_image, service_image_url
from app.utils.s3_utils import S3ConfigError
from app.utils.serializers import serialize_service

SERVICE_FIELDS = (
    "name",
    "description",
    "duration",
    "price",
    "is_popular",
    "category",
    "discount_percentage",
    "image_key",
)


def _to_dict(service):
    return serialize_service(service, service_image_url(service.image_key))


def get_all_services():
    try:
        services = db.session.query(Service).order_by(Service.name).all()
        return [_to_dict(s) for s in services]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch services: {e}")
        return []


def get_service_by_id(service_id):
    try:
        service = db.session.get(Service, service_id)
        return _to_dict(service) if service else None
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch service {service_id}: {e}")
        return None


def create_service(data):
    try:
        service = Service(**{f: data[f] for f in SERVICE_FIELDS if f in data})
        db.session.add(service)
        db.session.commit()
        current_app.logger.info(f"Service {service.id} created")
        return {"success": True, "service": _to_dict(service)}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create service: {e}")
        return {"success": False, "error": str(e)}


def update_service(service_id, updates):
    try:
        service = db.session.get(Service, service_id)
        if not service:
            return {"success": False, "error": "Service not found", "code": 404}

        for field in SERVICE_FIELDS:
            if field in updates:
                setattr(service, field, updates[field])

        db.session.commit()
        return {"success": True, "service": _to_dict(service)}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update service {service_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}


def delete_service(service_id):
    """Delete the row, then its stored image. A failed image delete is only logged."""
    try:
        service = db.session.get(Service, service_id)
        if not service:
            return {"success": False, "error": "Service not found", "code": 404}

        image_key = service.image_key
        db.session.delete(service)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to delete service {service_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}

    if image_key:
        try:
            delete_service_image(image_key)
        except (BotoCoreError, ClientError, S3ConfigError) as e:
            current_app.logger.warning(
                f"Service {service_id} deleted but image {image_key} was not removed: {e}"
            )

    current_app.logger.info(f"Service {service_id} deleted")
    return {"success": True}
