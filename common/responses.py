"""
Shop API - Response Envelope
=============================
Every JSON endpoint answers with the same envelope:
    {"success": bool, "response": <payload>, "error": {"message", "status"} | None}
"""

from typing import Any

from fastapi.responses import JSONResponse


def api_success(response: Any = None) -> dict:
    return {"success": True, "response": response, "error": None}


def api_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        {
            "success": False,
            "response": None,
            "error": {"message": message, "status": status_code},
        },
        status_code=status_code,
    )
