from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Blog Comments API",
            version="0.1.0",
            summary="Nested comments for blog posts with device-token soft deletion",
            routes=app.routes,
        )
        # There are no credentials beyond the device token sent in request bodies
        openapi_schema["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Human-readable error message")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": "Missing fields"},
                {"error": "Forbidden"},
                {"error": "Invalid JSON"},
            ]
        }
    }


class SuccessResponse(BaseModel):
    """Acknowledgement of a write."""

    success: bool = True
