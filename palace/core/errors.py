"""Errors raised by the function handlers (text-to-speech, LLM proxies).

Function handlers answer with ``{"error": message}`` instead of FastAPI's
``{"detail": ...}`` so clients written against the hosted functions keep
working unchanged.
"""

from fastapi import Request
from fastapi.responses import JSONResponse


class FunctionError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProviderError(FunctionError):
    """Upstream AI/TTS provider answered with an error or unusable payload."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message, status_code)


async def function_error_handler(request: Request, exc: FunctionError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
