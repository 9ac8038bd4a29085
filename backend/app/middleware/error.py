import time
import uuid
import json

from app.utils.logger import logger, log_api_request, log_error_with_trace
from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse

MAX_LOGGED_FIELD_CHARS = 200


def _summarize_body(body: dict) -> dict:
    """Keep logged request bodies small; long strings are cut."""
    summary = {}
    for key, value in body.items():
        if isinstance(value, str) and len(value) > MAX_LOGGED_FIELD_CHARS:
            value = value[:MAX_LOGGED_FIELD_CHARS] + "..."
        summary[key] = value
    return summary


def _unexpected_error_response(path: str, exc: Exception, req_id: str):
    message = f"Unexpected server error: {str(exc) or 'unknown error'}"
    if path.startswith("/ocr"):
        return PlainTextResponse(message, status_code=500)
    if path.startswith("/chat"):
        return JSONResponse(status_code=500, content={"reply": f"⚠️ {message}"})
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": message,
            "request_id": req_id,
        },
    )


async def exception_middleware(request: Request, call_next):
    req_id = str(uuid.uuid4())
    start = time.time()
    request.state.req_id = req_id

    # Capture request details
    method = request.method
    path = request.url.path
    query_params = dict(request.query_params)
    content_type = request.headers.get("content-type", "")

    # Only JSON bodies are captured; multipart uploads are never buffered here
    request_body = None
    if method in ["POST", "PUT", "PATCH"] and content_type.startswith("application/json"):
        try:
            body_bytes = await request.body()
            if body_bytes:
                parsed = json.loads(body_bytes.decode())
                request_body = _summarize_body(parsed) if isinstance(parsed, dict) else None
        except (UnicodeDecodeError, ValueError) as e:
            logger.warning(f"Could not parse request body: {e}")

    logger.info(
        f"INCOMING REQUEST: {method} {path}",
        extra={
            "request_id": req_id,
            "query_params": query_params,
            "client": request.client.host if request.client else None,
        }
    )

    status_code = 500
    error = None

    try:
        response = await call_next(request)
        status_code = response.status_code
    except Exception as exc:
        error = str(exc)

        log_error_with_trace(
            operation=f"{method} {path}",
            error=exc,
            metadata={
                "request_id": req_id,
                "request_body": request_body,
                "query_params": query_params,
            }
        )

        response = _unexpected_error_response(path, exc, req_id)
        status_code = 500
    finally:
        duration_ms = (time.time() - start) * 1000

        # Log API request with full context
        log_api_request(
            request_id=req_id,
            method=method,
            path=path,
            status_code=status_code,
            latency_ms=duration_ms,
            request_body=request_body,
            error=error,
            metadata={
                "query_params": query_params,
                "client": request.client.host if request.client else None,
            }
        )

        logger.info(
            f"REQUEST COMPLETED: {method} {path} - {status_code} ({duration_ms:.0f}ms)",
            extra={
                "request_id": req_id,
                "duration_ms": duration_ms,
                "status_code": status_code,
            }
        )

    response.headers["X-Request-ID"] = req_id
    return response
