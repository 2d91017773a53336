"""ASGI entrypoint for the memory splat API."""

from memory_splat.api.app import create_app
from memory_splat.containers import build_container

app = create_app(build_container())
