"""
Flask server for the usage API.
"""
from flask import Flask
from typing import Optional
import socket
import sys
import traceback
from ..config import WEB_PORTS, DB_PATH, settings
from ..services import UsageService
from .routes import register_routes


def find_free_port(preferred: Optional[int] = None) -> int:
    """Try preferred port, fall back if unavailable."""
    candidates = ((preferred,) if preferred else ()) + WEB_PORTS
    for port in candidates:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind(("127.0.0.1", port))
                return port
            except OSError:
                continue
    raise RuntimeError(f"No free port found ({'/'.join(str(p) for p in candidates)} busy)")


def create_app(service: Optional[UsageService] = None) -> Flask:
    """Create Flask app serving usage data from the given service."""
    app = Flask(__name__)
    register_routes(app, service or UsageService())
    return app


def main() -> None:
    print("=== ScreenTime Web ===")
    print(f"Python: {sys.executable}")
    print(f"DB path: {DB_PATH}")

    app = create_app()
    port = find_free_port(settings.web_port)
    print(f"Starting server on http://127.0.0.1:{port} ...", flush=True)

    try:
        app.run(host="127.0.0.1", port=port, debug=False)
    except Exception:
        print("!!! Flask failed to start:")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
