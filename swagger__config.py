"""
Swagger/OpenAPI configuration for the Barbershop Backend API
"""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api/docs",
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Barbershop Backend API",
        "description": "REST API for the barbershop dashboard: appointments, walk-ins, barbers, clients, services, reviews, financial reports and payouts",
        "contact": {"email": "support@barbershop.example"},
        "version": "1.0.0",
    },
    "host": "",
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": 'JWT Authorization header using the Bearer scheme. Example: "Authorization: Bearer {token}"',
        }
    },
    "security": [{"Bearer": []}],
    "tags": [
        {"name": "Authentication", "description": "Manager and barber login"},
        {"name": "Barbers", "description": "Barber roster, stats and availability"},
        {"name": "Clients", "description": "Client records"},
        {"name": "Services", "description": "Service catalog"},
        {"name": "Appointments", "description": "Appointments and walk-ins"},
        {"name": "Reviews", "description": "Review moderation"},
        {"name": "Financials", "description": "Financial reports and payouts"},
        {"name": "Images", "description": "Site and service images"},
    ],
    "definitions": {
        "Error": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "error"},
                "message": {"type": "string"},
                "details": {"type": "string"},
            },
        },
        "Success": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "success"},
                "message": {"type": "string"},
            },
        },
        "Barber": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string"},
                "email": {"type": "string", "format": "email"},
                "phone": {"type": "string"},
                "specialty": {"type": "string"},
                "photo_url": {"type": "string"},
                "commission_rate": {"type": "number", "format": "float"},
                "total_cuts": {"type": "integer"},
                "active": {"type": "boolean"},
                "rating": {"type": "number", "format": "float"},
            },
        },
        "Service": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string"},
                "price": {"type": "number", "format": "float"},
                "duration": {"type": "integer"},
                "category": {
                    "type": "string",
                    "enum": ["haircut", "beard", "combo", "special", "addon"],
                },
                "is_popular": {"type": "boolean"},
                "image_url": {"type": "string"},
            },
        },
        "Appointment": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "client_id": {"type": "integer"},
                "barber_id": {"type": "integer"},
                "service_id": {"type": "integer"},
                "date": {"type": "string", "format": "date"},
                "time": {"type": "string", "example": "10:30"},
                "status": {
                    "type": "string",
                    "enum": ["scheduled", "completed", "cancelled", "no-show"],
                },
                "type": {"type": "string", "enum": ["appointment", "walk-in"]},
                "price": {"type": "number", "format": "float"},
                "commission_amount": {"type": "number", "format": "float"},
            },
        },
        "FinancialEntry": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "date": {"type": "string", "format": "date"},
                "service_name": {"type": "string"},
                "barber_name": {"type": "string"},
                "status": {"type": "string"},
                "total_revenue": {"type": "number", "format": "float"},
                "barber_commission": {"type": "number", "format": "float"},
                "shop_revenue": {"type": "number", "format": "float"},
            },
        },
        "Payout": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "created_at": {"type": "string", "format": "date-time"},
                "amount": {"type": "number", "format": "float"},
                "reason": {"type": "string", "example": "REVERSAL of 12"},
                "user_name": {"type": "string"},
                "barber_id": {"type": "integer"},
            },
        },
        "Review": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "barber_id": {"type": "integer"},
                "client_name": {"type": "string"},
                "rating": {"type": "integer"},
                "comment": {"type": "string"},
                "approved": {"type": "boolean"},
                "created_at": {"type": "string", "format": "date-time"},
            },
        },
    },
}
