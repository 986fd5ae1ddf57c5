from collections import Counter
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import Appointment, Barber, Service
from app.utils.dates import week_start
from app.utils.finance import money

CHART_DAYS = 30
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def _round(value):
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(part, whole):
    return _round(part / whole * 100) if whole else 0


def trend(current, previous):
    """Percent change against the previous day; 100 when it starts from zero."""
    if previous:
        return _round((current - previous) / previous * 100)
    return 100 if current > 0 else 0


def _summarize(appointments):
    revenue = sum((money(a.price) for a in appointments), Decimal("0"))
    commission = sum((money(a.commission_amount) for a in appointments), Decimal("0"))
    return {
        "appointments": sum(1 for a in appointments if a.type == "appointment"),
        "walk_ins": sum(1 for a in appointments if a.type == "walk-in"),
        "revenue": revenue,
        "commission": commission,
    }


def _appointments_between(start, end):
    return (
        db.session.query(Appointment)
        .filter(Appointment.date >= start, Appointment.date <= end)
        .all()
    )


def get_dashboard_stats(today=None):
    """Aggregates for the manager dashboard, computed from a fresh read."""
    today = today or date.today()
    try:
        chart_start = today - timedelta(days=CHART_DAYS - 1)
        this_week_start = week_start(today)
        yesterday = today - timedelta(days=1)

        window = _appointments_between(
            min(chart_start, this_week_start), this_week_start + timedelta(days=6)
        )

        todays = _summarize([a for a in window if a.date == today])
        yesterdays = _summarize([a for a in window if a.date == yesterday])
        week_rows = [
            a
            for a in window
            if this_week_start <= a.date <= this_week_start + timedelta(days=6)
        ]
        week = _summarize(week_rows)
        week_visits = week["appointments"] + week["walk_ins"]

        top_barber = (
            db.session.query(Barber).order_by(Barber.total_cuts.desc()).first()
        )

        service_counts = Counter(
            a.service_id
            for a in window
            if a.service_id is not None and a.date >= this_week_start
        )
        top_service = {"id": None, "name": "", "count": 0}
        if service_counts:
            service_id, count = service_counts.most_common(1)[0]
            service = db.session.get(Service, service_id)
            top_service = {
                "id": service_id,
                "name": service.name if service else "",
                "count": count,
            }

        revenue_series = []
        visit_series = []
        for offset in range(CHART_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            stats = _summarize([a for a in window if a.date == day])
            name = DAY_NAMES[day.weekday()]
            revenue_series.append(
                {
                    "name": name,
                    "date": day.isoformat(),
                    "shop_revenue": float(stats["revenue"] - stats["commission"]),
                    "barber_commission": float(stats["commission"]),
                }
            )
            visit_series.append(
                {
                    "name": name,
                    "date": day.isoformat(),
                    "value": stats["appointments"] + stats["walk_ins"],
                }
            )

        return {
            "total_appointments_today": todays["appointments"],
            "total_walk_ins_today": todays["walk_ins"],
            "total_revenue_today": float(todays["revenue"]),
            "total_appointments_this_week": week["appointments"],
            "total_walk_ins_this_week": week["walk_ins"],
            "total_revenue_this_week": float(week["revenue"]),
            "appointments_percentage": percentage(week["appointments"], week_visits),
            "walk_ins_percentage": percentage(week["walk_ins"], week_visits),
            "top_barber": {
                "id": top_barber.id if top_barber else None,
                "name": top_barber.name if top_barber else "",
                "total_cuts": top_barber.total_cuts if top_barber else 0,
            },
            "top_service": top_service,
            "appointments_today_trend": trend(
                todays["appointments"], yesterdays["appointments"]
            ),
            "walk_ins_today_trend": trend(todays["walk_ins"], yesterdays["walk_ins"]),
            "revenue_today_trend": trend(todays["revenue"], yesterdays["revenue"]),
            "revenue_chart": revenue_series,
            "visits_chart": visit_series,
        }
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to compute dashboard stats: {e}")
        return None
