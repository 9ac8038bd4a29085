import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import traceback

from app.core.config import settings

# Create logs directory
LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Configure root logger
logger = logging.getLogger("campus_proxy")
logger.setLevel(settings.LOG_LEVEL.upper())

if not logger.handlers:
    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File handler - main application log (rotating)
    app_file_handler = RotatingFileHandler(
        LOG_DIR / "app.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8"
    )
    app_file_handler.setFormatter(console_formatter)
    logger.addHandler(app_file_handler)

    # File handler - error log
    error_file_handler = RotatingFileHandler(
        LOG_DIR / "error.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=3,
        encoding="utf-8"
    )
    error_file_handler.setFormatter(console_formatter)
    error_file_handler.setLevel(logging.ERROR)
    logger.addHandler(error_file_handler)

# Specialized loggers
llm_logger = logging.getLogger("campus_proxy.llm")
ocr_logger = logging.getLogger("campus_proxy.ocr")
api_logger = logging.getLogger("campus_proxy.api")
perf_logger = logging.getLogger("campus_proxy.performance")

# Structured log files (JSON format)
llm_log_file = LOG_DIR / "llm_calls.jsonl"
ocr_log_file = LOG_DIR / "ocr_calls.jsonl"
api_log_file = LOG_DIR / "api_requests.jsonl"
performance_log_file = LOG_DIR / "performance.jsonl"


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _append_jsonl(path: Path, entry: Dict[str, Any]) -> None:
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def log_llm_call(
    provider: str,
    model: str,
    success: bool,
    prompt_chars: int = 0,
    reply_chars: int = 0,
    status_code: Optional[int] = None,
    error: str = None,
    latency_ms: float = 0.0
):
    """Log chat-completion calls in structured JSON format."""
    log_entry = {
        "timestamp": _utcnow(),
        "provider": provider,
        "model": model,
        "prompt_chars": prompt_chars,
        "reply_chars": reply_chars,
        "status_code": status_code,
        "success": success,
        "error": error,
        "latency_ms": round(latency_ms, 2),
    }
    _append_jsonl(llm_log_file, log_entry)

    llm_logger.info(
        f"{provider}/{model}: {prompt_chars} prompt chars -> {reply_chars} reply chars, "
        f"latency={latency_ms:.0f}ms, success={success}"
    )


def log_ocr_call(
    provider: str,
    file_name: str,
    size_bytes: int,
    success: bool,
    status_code: Optional[int] = None,
    pages: Optional[int] = None,
    error: Optional[str] = None,
    latency_ms: float = 0.0
):
    """Log OCR provider calls in structured JSON format."""
    log_entry = {
        "timestamp": _utcnow(),
        "provider": provider,
        "file_name": file_name,
        "size_bytes": size_bytes,
        "status_code": status_code,
        "pages": pages,
        "success": success,
        "error": error,
        "latency_ms": round(latency_ms, 2),
    }
    _append_jsonl(ocr_log_file, log_entry)

    level = logging.INFO if success else logging.WARNING
    ocr_logger.log(
        level,
        f"{provider}: {file_name} ({size_bytes} bytes), status={status_code}, "
        f"latency={latency_ms:.0f}ms, success={success}"
        + (f", error={error}" if error else "")
    )


def log_api_request(
    request_id: str,
    method: str,
    path: str,
    status_code: int,
    latency_ms: float,
    request_body: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
):
    """Log API requests in structured JSON format with detailed context."""
    log_entry = {
        "timestamp": _utcnow(),
        "request_id": request_id,
        "method": method,
        "path": path,
        "status_code": status_code,
        "latency_ms": round(latency_ms, 2),
        "request_body": request_body,
        "error": error,
        "metadata": metadata or {},
    }
    _append_jsonl(api_log_file, log_entry)

    level = "ERROR" if status_code >= 500 else "WARNING" if status_code >= 400 else "INFO"
    getattr(api_logger, level.lower())(
        f"{method} {path} - {status_code} ({latency_ms:.0f}ms) [req_id={request_id}]"
    )


def log_performance(
    operation: str,
    duration_ms: float,
    success: bool,
    metadata: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None
):
    """Log performance metrics for critical operations."""
    log_entry = {
        "timestamp": _utcnow(),
        "operation": operation,
        "duration_ms": round(duration_ms, 2),
        "success": success,
        "metadata": metadata or {},
        "error": error,
    }
    _append_jsonl(performance_log_file, log_entry)

    perf_logger.info(
        f"{operation}: {duration_ms:.0f}ms, success={success}"
        + (f", error={error}" if error else "")
    )


def log_operation_start(operation: str, metadata: Optional[Dict[str, Any]] = None):
    """Log the start of a critical operation."""
    meta_str = f" {metadata}" if metadata else ""
    logger.info(f"START: {operation}{meta_str}")


def log_operation_end(operation: str, duration_ms: float, metadata: Optional[Dict[str, Any]] = None):
    """Log the end of a critical operation."""
    meta_str = f" {metadata}" if metadata else ""
    logger.info(f"END: {operation} ({duration_ms:.0f}ms){meta_str}")


def log_error_with_trace(operation: str, error: Exception, metadata: Optional[Dict[str, Any]] = None):
    """Log error with full traceback."""
    trace = traceback.format_exc()
    meta_str = f" | Metadata: {metadata}" if metadata else ""
    logger.error(
        f"ERROR in {operation}: {str(error)}{meta_str}\n{trace}"
    )
