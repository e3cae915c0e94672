"""ASGI entrypoint for the CastPro console."""

from castpro_console.api.app import create_app
from castpro_console.containers import build_container

app = create_app(build_container())
