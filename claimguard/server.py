"""
ClaimGuard API Server

FastAPI application exposing bill analysis, recurring-charge statement
analysis, fee calculation and dispute letter generation.
"""

import time
from typing import Dict, List

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from config.env_config import config

from . import __version__
from .appeal_letters import generate_appeal_by_category, generate_instructions_by_category
from .categories import CATEGORIES, DEMO_BILLS
from .exceptions import UnsupportedCategoryError
from .explanation_builder import build_explanation
from .fee_calculator import calculate_smart_fee
from .logging_config import configure_logging
from .router import analyze_by_category, resolve_category
from .schemas import (
    CategoryMeta,
    SmartFeeCalculation,
    StatementAnalysis,
    UnifiedAnalysisResult,
)
from .statement_analyzer import analyze_statement

logger = structlog.get_logger(__name__)


class HealthResponse(BaseModel):
    status: str
    timestamp: float
    uptime_seconds: float
    version: str = __version__


class AnalyzeRequest(BaseModel):
    text: str = Field(..., description="Raw bill text")
    category: str = Field(..., description="medical, auto, rent or utility")

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Bill text must not be empty")
        return value


class AnalyzeResponse(BaseModel):
    analysis: UnifiedAnalysisResult
    fee: SmartFeeCalculation
    explanation_markdown: str = Field(..., alias="explanationMarkdown")
    explanation_ssml: str = Field(..., alias="explanationSsml")

    model_config = ConfigDict(populate_by_name=True)


class StatementRequest(BaseModel):
    csv_text: str = Field(..., description="Raw CSV export", alias="csvText")

    model_config = ConfigDict(populate_by_name=True)


class FeeRequest(BaseModel):
    gross_savings: float = Field(..., description="Potential savings", alias="grossSavings")

    model_config = ConfigDict(populate_by_name=True)


class AppealRequest(BaseModel):
    analysis: UnifiedAnalysisResult


class AppealResponse(BaseModel):
    letter: str
    instructions: str


class DemoResponse(BaseModel):
    category: str
    text: str


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="ClaimGuard API",
        description="Bill analysis engine for medical, auto insurance, rent and utility bills",
        version=__version__,
    )
    app.state.startup_time = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time
        response.headers["X-Process-Time"] = f"{duration:.4f}"
        logger.info(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration * 1000, 2)
        )
        return response

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        now = time.time()
        return HealthResponse(
            status="healthy",
            timestamp=now,
            uptime_seconds=now - app.state.startup_time,
        )

    @app.get("/categories", response_model=List[CategoryMeta])
    async def list_categories():
        return CATEGORIES

    @app.get("/demo/{category}", response_model=DemoResponse)
    async def demo_bill(category: str):
        try:
            resolved = resolve_category(category)
        except UnsupportedCategoryError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return DemoResponse(category=resolved.value, text=DEMO_BILLS[resolved])

    @app.post("/analyze", response_model=AnalyzeResponse)
    def analyze(request: AnalyzeRequest):
        try:
            result = analyze_by_category(request.text, request.category)
        except UnsupportedCategoryError as e:
            logger.warning("Unsupported category requested", category=request.category)
            raise HTTPException(status_code=400, detail=str(e))

        fee = calculate_smart_fee(result.potential_savings)
        markdown, ssml = build_explanation(result, fee)
        return AnalyzeResponse(
            analysis=result,
            fee=fee,
            explanation_markdown=markdown,
            explanation_ssml=ssml,
        )

    @app.post("/analyze-statement", response_model=StatementAnalysis)
    def statement(request: StatementRequest):
        return analyze_statement(request.csv_text)

    @app.post("/fee", response_model=SmartFeeCalculation)
    async def fee(request: FeeRequest):
        return calculate_smart_fee(request.gross_savings)

    @app.post("/appeal", response_model=AppealResponse)
    async def appeal(request: AppealRequest) -> Dict[str, str]:
        result = request.analysis
        return {
            "letter": generate_appeal_by_category(result),
            "instructions": generate_instructions_by_category(result.category, result.provider_name),
        }

    return app


app = create_app()


def run() -> None:
    """Start the API server with the configured host and port."""
    configure_logging(config.log_level, config.log_json)
    logger.info(
        "Starting server",
        host=config.host,
        port=config.port,
        debug=config.debug,
        log_level=config.log_level
    )
    uvicorn.run(
        "claimguard.server:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        reload=config.debug,
        access_log=True
    )


if __name__ == "__main__":
    run()
