"""Pydantic configuration models for the canary."""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, Optional


DEFAULT_TARGETS = {
    "Google": "https://www.google.com/",
    "Youtube": "https://www.youtube.com/",
}

DEFAULT_REGION = "ap-southeast-2"


def validate_target_urls(targets: Dict[str, str]) -> Dict[str, str]:
    """Ensure every target URL is an absolute HTTP(S) URL."""
    for name, url in targets.items():
        if not isinstance(url, str) or not url.startswith(('http://', 'https://')):
            raise ValueError(f"URL for target '{name}' must start with http:// or https://")
    return targets


class ProbeConfig(BaseModel):
    """Per-probe behaviour."""
    timeout_ms: int = Field(default=5000, ge=100)
    max_concurrency: int = Field(default=1, ge=1)  # 1 keeps probes strictly sequential


class MetricsConfig(BaseModel):
    """CloudWatch metrics destination."""
    namespace: str = "LambdaFunctionMetrics"
    region: str = DEFAULT_REGION


class StorageConfig(BaseModel):
    """S3 destination for run log records."""
    bucket: Optional[str] = None
    region: str = DEFAULT_REGION
    prefix: str = "logs/"

    @field_validator('bucket')
    @classmethod
    def validate_bucket_name(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty bucket as unset."""
        return v or None

    @field_validator('prefix')
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Prefix is a key path and must end with a slash."""
        if v and not v.endswith('/'):
            v = f"{v}/"
        return v


class ScheduleConfig(BaseModel):
    """Interval used by the built-in scheduler."""
    rate_minutes: int = Field(default=2, ge=1)


class CanaryConfig(BaseModel):
    """Root configuration model for the canary."""
    targets: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TARGETS))
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)

    @field_validator('targets')
    @classmethod
    def validate_targets(cls, v: Dict[str, str]) -> Dict[str, str]:
        return validate_target_urls(v)
