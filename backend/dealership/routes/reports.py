from flask import Blueprint, jsonify, request

from dealership.services import reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api")


@reports_bp.get("/dashboard")
def dashboard():
    return jsonify(reporting_service.dashboard_stats()), 200


@reports_bp.get("/reports/financial")
def financial_report():
    return jsonify(reporting_service.financial_report()), 200


@reports_bp.get("/reports/monthly")
def monthly_report():
    months = request.args.get("months", 12, type=int)

    try:
        report = reporting_service.monthly_report(months=months)
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc), "field": "months"}), 400
