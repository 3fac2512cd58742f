"""Blueprint registration."""

from __future__ import annotations

from flask import Flask


def register_blueprints(app: Flask) -> None:
    from routes.milight import milight_bp

    app.register_blueprint(milight_bp)
