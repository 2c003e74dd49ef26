"""Module-level app for ``uvicorn nutrition_admin.api.asgi:app``."""

from nutrition_admin.api.app import create_app
from nutrition_admin.config import Settings
from nutrition_admin.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
