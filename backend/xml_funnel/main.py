"""
XML Funnel Service - 독립 마이크로서비스
스키마 없는 XML 업로드를 표 형식 데이터셋으로 변환하는 서비스

Port: 8004
"""

from dotenv import load_dotenv

load_dotenv()  # Load .env file

from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI

from funnel_shared.config.settings import Environment, get_settings
from funnel_shared.models.responses import ApiResponse
from funnel_shared.services.service_factory import XML_FUNNEL_SERVICE_INFO, create_fastapi_service, run_service
from funnel_shared.utils.app_logger import configure_logging, get_logger

from xml_funnel.routers.xml_ingest_router import router as xml_ingest_router
from xml_funnel.services.dataset_store import InMemoryDatasetStore

configure_logging(get_settings().log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 이벤트"""
    logger.info("XML Funnel Service 시작")
    if not hasattr(app.state, "dataset_store"):
        app.state.dataset_store = InMemoryDatasetStore()

    yield

    logger.info("XML Funnel Service 종료")


# FastAPI 앱 생성 - Service Factory 사용
app = create_fastapi_service(
    service_info=XML_FUNNEL_SERVICE_INFO,
    custom_lifespan=lifespan,
    include_health_check=False,
    include_logging_middleware=True,
)
app.state.dataset_store = InMemoryDatasetStore()

# 라우터 등록
app.include_router(xml_ingest_router, prefix="/api/v1")


@app.get("/", tags=["Health"])
async def root() -> Dict[str, Any]:
    """루트 엔드포인트"""
    return {
        "service": "xml-funnel",
        "version": XML_FUNNEL_SERVICE_INFO.version,
        "status": "running",
        "description": "스키마 없는 XML을 타입이 지정된 데이터셋으로 변환하는 마이크로서비스",
        "endpoints": {
            "health": "/health",
            "parse": "/api/v1/xml/parse",
            "structure": "/api/v1/xml/structure",
            "upload": "/api/v1/tenants/{tenant_id}/dashboards/{dashboard_id}/upload-xml",
            "dataset": "/api/v1/tenants/{tenant_id}/dashboards/{dashboard_id}/xml-data",
            "columns": "/api/v1/tenants/{tenant_id}/dashboards/{dashboard_id}/columns",
            "docs": "/docs",
        },
    }


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """서비스 상태 확인"""
    return ApiResponse.health_check(
        service_name="xml-funnel",
        version=XML_FUNNEL_SERVICE_INFO.version,
        description="XML 레코드 탐지 및 스키마 추론 서비스",
    ).to_dict()


if __name__ == "__main__":
    # auto-reload only while developing
    reload = get_settings().environment == Environment.DEVELOPMENT
    run_service(app, XML_FUNNEL_SERVICE_INFO, "xml_funnel.main:app", reload=reload)
