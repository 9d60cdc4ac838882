"""
Usage API routes.
"""
from flask import Flask, jsonify, request
from typing import Any, Dict
from ..config import RANGE_OPTIONS, settings
from ..models import UsageSnapshot
from ..services import UsageService
from ..services.aggregation import format_duration, top_n_by_usage


def range_label(days: int) -> str:
    return f"{days} Day{'s' if days > 1 else ''}"


def register_routes(app: Flask, service: UsageService) -> None:
    """Register usage API routes with Flask app."""

    def requested_days() -> int:
        return int(request.args.get("days", str(settings.default_days)))

    @app.before_request
    def require_usage_access() -> Any: # pyright: ignore[reportUnusedFunction]
        """Refuse usage data until access is granted, like the CLI report."""
        if request.path.startswith("/api/usage") and not service.has_permission():
            return jsonify({
                "error": "Permission required to access screen time",
                "granted": False
            }), 403
        return None

    @app.route("/api/ranges")
    def api_ranges() -> Any: # pyright: ignore[reportUnusedFunction]
        return jsonify([
            {"days": days, "label": range_label(days), "default": days == settings.default_days}
            for days in RANGE_OPTIONS
        ])

    @app.route("/api/permission", methods=["GET", "POST"])
    def api_permission() -> Any: # pyright: ignore[reportUnusedFunction]
        try:
            if request.method == "POST":
                service.request_permission()
            return jsonify({
                "granted": service.has_permission(),
                "platform": service.platform.name
            })
        except Exception as e:
            import traceback
            traceback.print_exc()
            return jsonify({"error": str(e)}), 500

    @app.route("/api/usage")
    def api_usage() -> Any: # pyright: ignore[reportUnusedFunction]
        try:
            snapshot = service.get_snapshot(requested_days())
            return jsonify(snapshot_to_dict(snapshot))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            import traceback
            traceback.print_exc()
            return jsonify({"error": str(e)}), 500

    @app.route("/api/usage/top")
    def api_top_apps() -> Any: # pyright: ignore[reportUnusedFunction]
        """Get top apps for the selected range."""
        try:
            days = requested_days()
            limit = int(request.args.get("limit", str(settings.top_apps)))
            top_apps = top_n_by_usage(service.get_app_usage(days), limit)
            return jsonify([
                {"app": app_name, "millis": millis, "formatted": format_duration(millis)}
                for app_name, millis in top_apps
            ])
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            import traceback
            traceback.print_exc()
            return jsonify({"error": str(e)}), 500

    @app.route("/api/usage/pie")
    def api_pie() -> Any: # pyright: ignore[reportUnusedFunction]
        """Get chart slices for the selected range."""
        try:
            snapshot = service.get_snapshot(requested_days())
            return jsonify([
                {
                    "app": s.name,
                    "millis": s.millis,
                    "formatted": format_duration(s.millis),
                    "percentage": s.percentage,
                    "start_angle": s.start_angle,
                    "sweep_angle": s.sweep_angle,
                    "color": s.color
                }
                for s in snapshot.pie
            ])
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            import traceback
            traceback.print_exc()
            return jsonify({"error": str(e)}), 500


def snapshot_to_dict(snapshot: UsageSnapshot) -> Dict[str, Any]:
    """Convert a snapshot into the JSON shape served by /api/usage."""
    return {
        "days": snapshot.days,
        "start": snapshot.window.start.isoformat(),
        "end": snapshot.window.end.isoformat(),
        "total_millis": snapshot.usage.total_ms,
        "total_formatted": format_duration(snapshot.usage.total_ms),
        "apps": snapshot.usage.per_application_ms,
    }
