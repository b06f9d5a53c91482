"""ASGI entrypoint for the hairstyle studio API."""

from hairstyle_studio.api.app import create_app
from hairstyle_studio.containers import build_container

app = create_app(build_container())
