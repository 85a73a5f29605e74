"""Report-generation endpoint.

POST /api/analyze takes the captured image (data URI), the symptoms, and
the optional classification result, and answers with the text of the
first Gemini model that produces a report.
"""

import logging
from typing import Iterator, List, Optional, Union

import requests
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from core.config import get_settings
from core.dispatcher import ModelFallbackDispatcher
from core.errors import AllBackendsExhausted, ConfigurationError, ValidationError
from core.utils import parse_data_uri

logger = logging.getLogger(__name__)


class LabelConfidenceModel(BaseModel):
    label: str
    confidence: float


class VisionAnalysis(BaseModel):
    label: Optional[str] = None
    confidences: List[LabelConfidenceModel] = Field(default_factory=list)


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image: Optional[str] = None
    symptoms: Union[List[str], str, None] = None
    vision_analysis: Optional[VisionAnalysis] = Field(default=None, alias="visionAnalysis")


class AnalyzeResponse(BaseModel):
    result: str


app = FastAPI(
    title="DermaVision AI",
    version="1.0.0",
    description="Skin lesion report generation with Gemini model fallback",
)


def get_http() -> Iterator[requests.Session]:
    """HTTP session used to reach Gemini for one request, closed afterwards."""
    session = requests.Session()
    try:
        yield session
    finally:
        session.close()


# ============================================
# Exception Handlers
# ============================================

@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error: %s", exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning("Rejected request: %s", exc.message)
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Malformed request body: %s", exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(AllBackendsExhausted)
async def backends_exhausted_handler(request: Request, exc: AllBackendsExhausted):
    logger.error(exc.message)
    return JSONResponse(status_code=503, content={"error": exc.message})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Fatal server error: %s", exc, exc_info=True)
    return JSONResponse(status_code=500, content={"error": f"Internal server error: {exc}"})


# ============================================
# Routes
# ============================================

@app.post("/api/analyze", response_model=AnalyzeResponse)
def analyze(body: AnalyzeRequest, http=Depends(get_http)):
    """Run the model fallback for one captured image."""
    logger.info("/api/analyze hit")
    settings = get_settings()
    api_key = settings.require_api_key()

    if not body.image:
        raise ValidationError("Image not provided")

    dispatcher = ModelFallbackDispatcher(
        api_key=api_key,
        models=settings.gemini_models,
        api_base=settings.gemini_api_base,
        http=http,
        deadline_s=settings.report_deadline_s,
    )
    label = body.vision_analysis.label if body.vision_analysis else None
    text = dispatcher.generate(parse_data_uri(body.image), symptoms=body.symptoms, label=label)
    return AnalyzeResponse(result=text)


@app.get("/healthz")
def healthz():
    settings = get_settings()
    return {"status": "ok", "credential_configured": bool(settings.gemini_api_key)}
