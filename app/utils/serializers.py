# JSON shapes for the barbershop records
from datetime import date, datetime


def iso(value):
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def as_float(value):
    return float(value) if value is not None else None


def serialize_barber(barber):
    return {
        "id": barber.id,
        "name": barber.name,
        "email": barber.email,
        "phone": barber.phone,
        "age": barber.age,
        "specialty": barber.specialty,
        "bio": barber.bio,
        "photo_url": barber.photo_url,
        "join_date": iso(barber.join_date),
        "total_cuts": barber.total_cuts or 0,
        "appointment_cuts": barber.appointment_cuts or 0,
        "walk_in_cuts": barber.walk_in_cuts or 0,
        "commission_rate": as_float(barber.commission_rate),
        "total_commission": as_float(barber.total_commission) or 0.0,
        "active": bool(barber.active),
        "rating": as_float(barber.rating),
    }


def serialize_client(client, total_visits=None):
    return {
        "id": client.id,
        "name": client.name,
        "email": client.email,
        "phone": client.phone,
        "preferred_barber_id": client.preferred_barber_id,
        "total_visits": (
            total_visits if total_visits is not None else client.total_visits or 0
        ),
        "last_visit": iso(client.last_visit),
        "notes": client.notes,
    }


def serialize_service(service, image_url=None):
    return {
        "id": service.id,
        "name": service.name,
        "description": service.description,
        "duration": service.duration,
        "price": as_float(service.price),
        "is_popular": bool(service.is_popular),
        "category": service.category,
        "discount_percentage": as_float(service.discount_percentage),
        "image_key": service.image_key,
        "image_url": image_url,
    }


def serialize_appointment(appointment, with_details=False):
    data = {
        "id": appointment.id,
        "client_id": appointment.client_id,
        "barber_id": appointment.barber_id,
        "service_id": appointment.service_id,
        "date": iso(appointment.date),
        "time": appointment.time,
        "status": appointment.status,
        "type": appointment.type,
        "duration": appointment.duration,
        "price": as_float(appointment.price),
        "commission_amount": as_float(appointment.commission_amount),
        "notes": appointment.notes,
        "walk_in_client_name": appointment.walk_in_client_name,
        "created_at": iso(appointment.created_at),
        "updated_at": iso(appointment.updated_at),
    }
    if with_details:
        data["client"] = (
            {
                "id": appointment.client.id,
                "name": appointment.client.name,
                "phone": appointment.client.phone,
            }
            if appointment.client
            else None
        )
        data["barber"] = (
            {"id": appointment.barber.id, "name": appointment.barber.name}
            if appointment.barber
            else None
        )
        data["service"] = (
            {
                "id": appointment.service.id,
                "name": appointment.service.name,
                "price": as_float(appointment.service.price),
            }
            if appointment.service
            else None
        )
    return data


def serialize_review(review):
    return {
        "id": review.id,
        "barber_id": review.barber_id,
        "client_name": review.client_name,
        "client_email": review.client_email,
        "rating": review.rating,
        "comment": review.comment,
        "approved": bool(review.approved),
        "created_at": iso(review.created_at),
    }


def serialize_payout(payout):
    return {
        "id": payout.id,
        "created_at": iso(payout.created_at),
        "amount": as_float(payout.amount),
        "reason": payout.reason,
        "user_id": payout.user_id,
        "user_name": payout.user_name,
        "barber_id": payout.barber_id,
        "reversed_payout_id": payout.reversed_payout_id,
    }
