# app.py
"""
Main Flask application entrypoint.

- Loads env/config
- Enables CORS for /api/*
- Registers blueprints: Quiz (questions, submissions), Summary
"""

from __future__ import annotations
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

from flask import Flask, jsonify
from flask_cors import CORS

# Backend/ holds the importable modules (config, routes, services)
sys.path.insert(0, str(Path(__file__).resolve().parent / "Backend"))

# ---- Config & blueprints ----
from config import Config
from routes.summary import summary_bp
from services.quiz_service.routes import quiz_bp

# ---------------------------------------------------------------------
# App Factory
# ---------------------------------------------------------------------
def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # --- Register blueprints ---
    app.register_blueprint(quiz_bp, url_prefix="/api")
    app.register_blueprint(summary_bp, url_prefix="/api")

    # --- Health (public) ---
    @app.get("/api/health")
    def health():
        return jsonify({
            "ok": True,
            "service": "flask",
            "server_time": datetime.now(timezone.utc).isoformat(),
        })

    # --- JSON error handlers ---
    @app.errorhandler(400)
    def handle_400(err):
        return jsonify({"error": str(err)}), 400

    @app.errorhandler(404)
    def handle_404(err):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_405(err):
        return jsonify({"error": "Method Not Allowed"}), 405

    @app.errorhandler(500)
    def handle_500(err):
        return jsonify({"error": "Internal server error"}), 500

    return app


# ---------------------------------------------------------------------
# Dev Server Launcher
# ---------------------------------------------------------------------
app = create_app()

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    port = int(os.getenv("PORT", "5001"))
    app.run(host="0.0.0.0", port=port, debug=Config.is_development())
