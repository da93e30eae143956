from .service_factory import (
    XML_FUNNEL_SERVICE_INFO,
    ServiceInfo,
    create_fastapi_service,
    run_service,
)

__all__ = [
    "XML_FUNNEL_SERVICE_INFO",
    "ServiceInfo",
    "create_fastapi_service",
    "run_service",
]
