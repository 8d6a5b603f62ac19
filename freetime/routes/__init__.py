# freetime/routes/__init__.py
from .availability import availability_bp


def register_blueprints(app):
    app.register_blueprint(availability_bp)
