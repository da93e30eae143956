"""
Response models for XML Funnel services

Standardized envelope used by the health and root endpoints.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class ApiResponse:
    """
    Standardized API response model
    """

    status: str
    message: str
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response"""
        result = {"status": self.status, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        if self.errors is not None:
            result["errors"] = self.errors
        return result

    @classmethod
    def success(cls, message: str, data: Optional[Dict[str, Any]] = None) -> "ApiResponse":
        """Create success response (200 OK)"""
        return cls(status="success", message=message, data=data)

    @classmethod
    def error(cls, message: str, errors: Optional[List[str]] = None) -> "ApiResponse":
        """Create error response (4xx/5xx status codes)"""
        return cls(status="error", message=message, errors=errors)

    @classmethod
    def health_check(
        cls, service_name: str, version: str, description: Optional[str] = None
    ) -> "ApiResponse":
        """Create standardized health check response"""
        health_data = {"service": service_name, "version": version, "status": "healthy"}
        if description:
            health_data["description"] = description

        return cls(status="success", message="Service is healthy", data=health_data)

    def is_success(self) -> bool:
        return self.status in ["success", "created", "accepted"]
