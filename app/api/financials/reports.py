# app/api/financials/reports.py
from datetime import datetime
from io import BytesIO

import pandas as pd
from flask import Blueprint, g, jsonify, request, send_file

from app.services.financial_service import (
    get_barber_financial_data,
    get_financial_data,
)
from app.services.payout_service import get_payouts
from app.utils.auth_utils import token_required
from app.utils.dates import default_report_range, parse_date
from app.utils.finance import format_lira, summarize_barber, summarize_shop

financial_reports_bp = Blueprint(
    "financial_reports", __name__, url_prefix="/api/financials"
)


def _report_range():
    """start_date/end_date from the query string, defaulting to the last 30 days."""
    default_start, default_end = default_report_range()
    start = parse_date(request.args.get("start_date")) or default_start
    end = parse_date(request.args.get("end_date")) or default_end
    if start > end:
        raise ValueError("start_date must be on or before end_date")
    return start, end


@financial_reports_bp.route("/report", methods=["GET"])
@token_required("MANAGER")
def shop_report():
    """
    GET /api/financials/report?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD[&status=completed]
    Purpose: Shop-wide revenue split for a date range.

    Behavior:
    - Every appointment in range counts unless status is given.
    - net_shop_revenue is revenue minus commission; payouts are listed but
      not subtracted.
    """
    try:
        start, end = _report_range()
    except ValueError as e:
        return jsonify({"status": "error", "message": str(e)}), 400

    entries = get_financial_data(start, end, status=request.args.get("status"))
    payouts = get_payouts(start, end)

    return jsonify(
        {
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "entries": entries,
            "payouts": payouts,
            "summary": summarize_shop(entries, payouts),
        }
    )


@financial_reports_bp.route("/barber/<int:barber_id>/report", methods=["GET"])
@token_required("MANAGER", "BARBER")
def barber_report(barber_id):
    """
    GET /api/financials/barber/<barber_id>/report?start_date&end_date
    Purpose: A barber's completed work, payouts and net earnings.

    Behavior:
    - Only completed appointments are counted.
    - net_earnings = commission - payouts (reversals subtract), can be negative.
    """
    user = g.current_user
    if user.get("role") == "BARBER" and user.get("barber_id") != barber_id:
        return jsonify({"status": "error", "message": "Forbidden"}), 403

    try:
        start, end = _report_range()
    except ValueError as e:
        return jsonify({"status": "error", "message": str(e)}), 400

    entries = get_barber_financial_data(start, end, barber_id)
    payouts = get_payouts(start, end, barber_id=barber_id)

    return jsonify(
        {
            "barber_id": barber_id,
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "entries": entries,
            "payouts": payouts,
            "summary": summarize_barber(entries, payouts),
        }
    )


@financial_reports_bp.route("/report/export", methods=["GET"])
@token_required("MANAGER")
def export_report():
    """Excel workbook with the entries, payouts and summary for a date range."""
    try:
        start, end = _report_range()
    except ValueError as e:
        return jsonify({"status": "error", "message": str(e)}), 400

    entries = get_financial_data(start, end, status=request.args.get("status"))
    payouts = get_payouts(start, end)
    summary = summarize_shop(entries, payouts)

    output = BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        df_entries = pd.DataFrame(
            entries,
            columns=[
                "id",
                "date",
                "service_name",
                "barber_name",
                "status",
                "total_revenue",
                "barber_commission",
                "shop_revenue",
            ],
        )
        df_entries.to_excel(writer, sheet_name="Entries", index=False)

        df_payouts = pd.DataFrame(
            payouts,
            columns=["id", "created_at", "amount", "reason", "user_name", "barber_id"],
        )
        df_payouts.to_excel(writer, sheet_name="Payouts", index=False)

        df_summary = pd.DataFrame(
            [
                ("Total Revenue", format_lira(summary["total_revenue"])),
                ("Barber Commission", format_lira(summary["total_commission"])),
                ("Shop Revenue", format_lira(summary["total_shop_revenue"])),
                ("Total Payouts", format_lira(summary["total_payouts"])),
                ("Net Shop Revenue", format_lira(summary["net_shop_revenue"])),
            ],
            columns=["Metric", "Amount"],
        )
        df_summary.to_excel(writer, sheet_name="Summary", index=False)

    output.seek(0)
    filename = f"Financial_Report_{start:%Y%m%d}_{end:%Y%m%d}_{datetime.now():%H%M%S}.xlsx"

    return send_file(
        output,
        as_attachment=True,
        download_name=filename,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
