"""FastAPI dependencies that hand long-lived services to route handlers.

The pipeline and blob store are built once (app factory / lifespan) and
kept on ``app.state``; tests swap them via ``app.dependency_overrides``.
"""

from fastapi import Request

from pravas.services.pipeline import TranscriptionPipeline
from pravas.services.storage.blobs import BaseBlobStore


def get_pipeline(request: Request) -> TranscriptionPipeline:
    return request.app.state.pipeline


def get_blob_store(request: Request) -> BaseBlobStore:
    return request.app.state.blob_store
