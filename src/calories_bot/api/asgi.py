"""ASGI entrypoint for the calories bot API."""

from calories_bot.api.app import create_app
from calories_bot.containers import build_container

app = create_app(build_container())
