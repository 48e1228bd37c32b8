from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sales_tool.core.response import ErrorItem, build_response
from sales_tool.core.runner import run_command

app = FastAPI(title="Chat Sales Report API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://127.0.0.1:8000", "http://localhost:8000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_validation_details(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", []))
        msg = err.get("msg", "Invalid input")
        parts.append(f"{loc}: {msg}")
    return "; ".join(parts) or "Validation error"


def _api_error(request: Request, code: str, message: str, hint: str, details: str | None = None, status: int = 400):
    params = {
        "path": request.url.path,
        "method": request.method,
        "query": dict(request.query_params),
    }
    payload = build_response(
        command="api",
        params=params,
        data=None,
        warnings=[],
        ok=False,
        error=ErrorItem(code=code, message=message, hint=hint, details=details),
    )
    return JSONResponse(payload, status_code=status)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = _format_validation_details(exc)
    return _api_error(request, "VALIDATION", "Validation error.", "Check required fields and retry.", details, status=422)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return _api_error(request, "INTERNAL", "Request failed.", "Check inputs and retry.", str(exc.detail), status=exc.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    return _api_error(request, "INTERNAL", "Unexpected server error.", "Check server logs and retry.", str(exc), status=500)


@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/windows")
async def windows():
    return run_command("windows", {})


@app.get("/report")
async def report(
    base: Optional[str] = None,
    items: Optional[str] = Query(default=None, description="Comma separated item names"),
    now: Optional[str] = None,
):
    return run_command("report", {"base": base, "items": items, "now": now})


@app.get("/items")
async def items(base: Optional[str] = None):
    return run_command("items", {"base": base})


@app.get("/status")
async def status(base: Optional[str] = None):
    return run_command("status", {"base": base})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sales_tool.api.server:app", host="127.0.0.1", port=8000, reload=False)
