from datetime import date

from flask import current_app
from sqlalchemy import and_, func
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import Appointment, Client
from app.utils.dates import parse_date
from app.utils.serializers import serialize_client

CLIENT_FIELDS = ("name", "email", "phone", "preferred_barber_id", "notes")


def _clients_with_visits():
    """Clients joined to a count of their completed appointments."""
    return (
        db.session.query(Client, func.count(Appointment.id))
        .outerjoin(
            Appointment,
            and_(
                Appointment.client_id == Client.id,
                Appointment.status == "completed",
            ),
        )
        .group_by(Client.id)
    )


def get_all_clients():
    try:
        rows = _clients_with_visits().order_by(Client.name).all()
        return [serialize_client(client, visits) for client, visits in rows]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch clients: {e}")
        return []


def get_client_by_id(client_id):
    try:
        row = _clients_with_visits().filter(Client.id == client_id).first()
        if not row:
            return None
        client, visits = row
        return serialize_client(client, visits)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch client {client_id}: {e}")
        return None


def create_client(data):
    try:
        client = Client(
            name=data.get("name"),
            email=data.get("email") or None,
            phone=data.get("phone") or None,
            preferred_barber_id=data.get("preferred_barber_id") or None,
            notes=data.get("notes"),
            last_visit=parse_date(data.get("last_visit")),
            total_visits=0,
        )
        db.session.add(client)
        db.session.commit()
        current_app.logger.info(f"Client {client.id} created")
        return {"success": True, "client": serialize_client(client, 0)}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create client: {e}")
        return {"success": False, "error": str(e)}


def update_client(client_id, updates):
    try:
        client = db.session.get(Client, client_id)
        if not client:
            return {"success": False, "error": "Client not found", "code": 404}

        for field in CLIENT_FIELDS:
            if field in updates:
                value = updates[field]
                if field != "name" and value == "":
                    value = None
                setattr(client, field, value)
        if "last_visit" in updates:
            client.last_visit = parse_date(updates["last_visit"])

        db.session.commit()
        return {"success": True, "client": get_client_by_id(client_id)}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update client {client_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}


def delete_client(client_id):
    try:
        client = db.session.get(Client, client_id)
        if not client:
            return {"success": False, "error": "Client not found", "code": 404}

        db.session.query(Appointment).filter(Appointment.client_id == client_id).update(
            {Appointment.client_id: None}
        )
        db.session.delete(client)
        db.session.commit()
        current_app.logger.info(f"Client {client_id} deleted")
        return {"success": True}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to delete client {client_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}


def increment_client_visit(client_id, visit_date=None):
    """Bump the stored visit counter and last visit date."""
    try:
        client = db.session.get(Client, client_id)
        if not client:
            return {"success": False, "error": "Client not found", "code": 404}

        client.total_visits = (client.total_visits or 0) + 1
        client.last_visit = visit_date or date.today()
        db.session.commit()
        return {"success": True}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to record visit for client {client_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}
