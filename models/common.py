from pydantic import BaseModel, Field
from typing import Dict, Any, Optional


class RateLimitSummary(BaseModel):
    remaining: Optional[int] = Field(None, description="Upstream requests left, if known")
    reset: Optional[int] = Field(None, description="Upstream window reset as unix timestamp, if known")


class ApiResponse(BaseModel):
    data: Any = Field(..., description="View-specific payload")
    cached: bool = Field(False, description="Whether the payload came from the result cache")
    rateLimit: RateLimitSummary = Field(default_factory=RateLimitSummary, description="Last known upstream rate limit")

    class Config:
        json_schema_extra = {
            "example": {
                "data": {
                    "languages": [
                        {
                            "name": "TypeScript",
                            "bytes": 1000,
                            "repos": 2,
                            "percentage": 83.33,
                            "color": "#3178c6"
                        }
                    ],
                    "totalRepos": 2
                },
                "cached": False,
                "rateLimit": {"remaining": 4987, "reset": 1717588800}
            }
        }


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service health status")
    timestamp: str = Field(..., description="Current timestamp")
    version: str = Field(..., description="Application version")
    cache: Dict[str, Any] = Field(..., description="Cache information")
    config: Dict[str, Any] = Field(..., description="Configuration details")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error message")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "User not found"
            }
        }
