"""ASGI entry point: ``hypercorn sparklink.asgi:app``."""

from sparklink.app_factory import create_app

app = create_app()
