from __future__ import annotations

from pathlib import Path

from flask import Flask, send_from_directory

from ..container import Container


def register(app: Flask, container: Container) -> None:
    """Serve local uploads under ``LOCAL_STORAGE_BASE_URL``.

    Only registered for the local backend with a path-style base URL; S3 and
    CDN URLs are served elsewhere.
    """
    settings = container.settings
    base_url = settings.local_storage_base_url.rstrip("/")
    if settings.storage_backend != "local" or not base_url.startswith("/"):
        return

    root = Path(settings.local_storage_dir).resolve()

    @app.route(f"{base_url}/<path:filename>", methods=["GET"], endpoint="storage_uploads")
    def uploads(filename: str):
        return send_from_directory(root, filename)
