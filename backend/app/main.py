from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from app.api.chat import router as chat_router
from app.api.ocr import router as ocr_router
from app.core.config import settings
from app.core.errors import ChatError, OcrError
from app.middleware.error import exception_middleware
from app.middleware.security import security_headers_middleware
from app.utils.logger import logger

app = FastAPI(title="Campus Assist Backend")

# Allow the course site to call the backend from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(exception_middleware)
app.middleware("http")(security_headers_middleware)

app.include_router(ocr_router, prefix="/ocr", tags=["ocr"])
app.include_router(chat_router, prefix="/chat", tags=["chat"])


def _chat_error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"reply": f"⚠️ {message}"})


@app.exception_handler(OcrError)
async def ocr_error_handler(request: Request, exc: OcrError):
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError):
    return _chat_error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    path = request.url.path
    logger.warning(f"Malformed request to {path}: {exc.errors()}")
    if path.startswith("/ocr/markdown"):
        return PlainTextResponse(
            "Invalid request: expected JSON {file_name, text}.", status_code=400
        )
    if path.startswith("/ocr"):
        return PlainTextResponse(
            'Invalid request: upload a PDF as form-data field "file".', status_code=400
        )
    if path.startswith("/chat"):
        return _chat_error_response(400, "Invalid request body.")
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/live")
def live():
    return {"status": "alive"}


@app.get("/ready")
def ready():
    return {"status": "ready"}
