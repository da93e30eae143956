"""
Service Factory Module

Provides FastAPI service creation utilities for the XML Funnel service.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from funnel_shared.config.settings import ApplicationSettings, get_settings
from funnel_shared.models.responses import ApiResponse

logger = logging.getLogger(__name__)


class ServiceInfo:
    """Service configuration container"""

    def __init__(
        self,
        name: str,
        title: str,
        description: str,
        version: str = "1.0.0",
        port: int = 8000,
        host: str = "localhost",
        tags: Optional[List[Dict[str, str]]] = None
    ):
        self.name = name
        self.title = title
        self.description = description
        self.version = version
        self.port = port
        self.host = host
        self.tags = tags or []


def create_fastapi_service(
    service_info: ServiceInfo,
    custom_lifespan: Optional[Callable] = None,
    include_health_check: bool = True,
    include_logging_middleware: bool = True,
    app_settings: Optional[ApplicationSettings] = None,
) -> FastAPI:
    """
    Create a standardized FastAPI application with common configurations.

    Args:
        service_info: Service configuration
        custom_lifespan: Optional custom lifespan function
        include_health_check: Whether to include default health check endpoint
        include_logging_middleware: Whether to include request logging middleware
        app_settings: Settings override (defaults to the global settings)

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or get_settings()

    if custom_lifespan:
        lifespan_func = custom_lifespan
    else:
        @asynccontextmanager
        async def default_lifespan(app: FastAPI):
            logger.info(f"{service_info.name} service starting")
            yield
            logger.info(f"{service_info.name} service stopped")
        lifespan_func = default_lifespan

    openapi_tags = [
        {"name": "Health", "description": "Health check and service status"}
    ]
    openapi_tags.extend(service_info.tags)

    app = FastAPI(
        title=service_info.title,
        description=service_info.description,
        version=service_info.version,
        lifespan=lifespan_func,
        openapi_tags=openapi_tags
    )

    _configure_cors(app, app_settings)

    if include_logging_middleware:
        _add_logging_middleware(app)

    if include_health_check:
        _add_health_check(app, service_info)

    logger.info(f"{service_info.name} FastAPI app created")

    return app


def _configure_cors(app: FastAPI, app_settings: ApplicationSettings) -> None:
    """Configure CORS middleware based on settings"""
    services = app_settings.services
    if not services.cors_enabled:
        logger.info("CORS disabled")
        return

    origins = services.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"CORS enabled with origins: {origins}")


def _add_logging_middleware(app: FastAPI) -> None:
    """Add request logging middleware"""
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            f'Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {process_time:.4f}s'
        )
        return response


def _add_health_check(app: FastAPI, service_info: ServiceInfo) -> None:
    """Add standardized health check endpoints"""

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "service": service_info.name,
            "title": service_info.title,
            "version": service_info.version,
            "description": service_info.description,
            "status": "running"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        return ApiResponse.health_check(
            service_name=service_info.name,
            version=service_info.version,
            description=service_info.description
        ).to_dict()


def create_uvicorn_config(
    service_info: ServiceInfo,
    reload: bool = True,
    app_settings: Optional[ApplicationSettings] = None,
) -> Dict[str, Any]:
    """
    Create standardized uvicorn configuration.
    """
    app_settings = app_settings or get_settings()
    services = app_settings.services

    config = {
        "host": service_info.host,
        "port": service_info.port,
        "reload": reload,
        "log_config": _get_logging_config(service_info.name, app_settings.log_level),
    }

    if services.use_https:
        config.update({
            "ssl_certfile": services.ssl_cert_path,
            "ssl_keyfile": services.ssl_key_path,
        })
        logger.info(f"HTTPS enabled for {service_info.name} on port {service_info.port}")
    else:
        logger.info(f"HTTP enabled for {service_info.name} on port {service_info.port}")

    return config


def _get_logging_config(service_name: str, level: str = "INFO") -> Dict[str, Any]:
    """Get standardized logging configuration for uvicorn"""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(levelprefix)s %(asctime)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": '%(levelprefix)s %(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s',
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
            "access": {
                "formatter": "access",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {"level": level},
            "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
            service_name.lower(): {"handlers": ["default"], "level": level, "propagate": False},
        },
    }


def run_service(
    app: FastAPI,
    service_info: ServiceInfo,
    app_module_path: str,
    reload: bool = True
) -> None:
    """
    Run the service with standardized uvicorn configuration.

    Args:
        app: FastAPI application instance
        service_info: Service configuration
        app_module_path: Module path for uvicorn (e.g., "xml_funnel.main:app")
        reload: Enable auto-reload for development
    """
    config = create_uvicorn_config(service_info, reload)
    uvicorn.run(app_module_path, **config)


def build_xml_funnel_service_info(app_settings: Optional[ApplicationSettings] = None) -> ServiceInfo:
    """Service info for the XML Funnel service"""
    services = (app_settings or get_settings()).services
    return ServiceInfo(
        name="XML-Funnel",
        title="XML Funnel Service",
        description="스키마 없는 XML 문서를 타입이 지정된 표 형식 데이터셋으로 변환하는 서비스",
        version="0.1.0",
        port=services.xml_funnel_port,
        host=services.xml_funnel_host,
        tags=[
            {"name": "XML Parsing", "description": "Record discovery, schema inference and row extraction"},
            {"name": "Datasets", "description": "Per-dashboard dataset uploads"},
        ]
    )


XML_FUNNEL_SERVICE_INFO = build_xml_funnel_service_info()
