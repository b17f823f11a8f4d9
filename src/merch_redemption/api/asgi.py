"""ASGI entrypoint for the merch redemption API."""

from merch_redemption.api.app import create_app
from merch_redemption.containers import build_container

app = create_app(build_container())
