"""Data models for link-keepalive."""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


DEFAULT_DOWNLOAD_BYTES = 1024 * 1024


class KeepAliveConfig(BaseModel):
    """Tuning parameters for a keep-alive run."""
    urls: str = ""
    max_retries: int = Field(default=3, ge=1)
    page_timeout: int = Field(default=60000, gt=0)  # milliseconds
    wait_time: int = Field(default=5000, ge=0)  # milliseconds after each click
    render_wait: int = Field(default=5000, ge=0)  # milliseconds after navigation
    headless: bool = True
    verbose: bool = False
    download_bytes: int = Field(default=DEFAULT_DOWNLOAD_BYTES, gt=0)
    download_timeout: float = Field(default=60.0, gt=0)  # seconds
    verify_ssl: bool = True
    chromium_executable: Optional[str] = None
    user_agent: Optional[str] = None
    block_resources: bool = True
    min_target_delay: float = Field(default=2.0, ge=0)  # seconds
    max_target_delay: float = Field(default=7.0, ge=0)  # seconds
    heuristics_path: Optional[Path] = None
    log_file: Optional[str] = None

    @model_validator(mode='after')
    def _check_delay_range(self):
        if self.min_target_delay > self.max_target_delay:
            raise ValueError("min_target_delay must not exceed max_target_delay")
        return self


class ErrorRecord(BaseModel):
    """An error attributed to a target or link URL."""
    url: str
    error: str


class VerificationResult(BaseModel):
    """Result of verifying a single download link."""
    url: str
    success: bool
    status_code: Optional[int] = None
    bytes_read: int = 0
    error: Optional[str] = None
    duration: Optional[float] = None


class RunStatistics(BaseModel):
    """Counters accumulated over a single run."""
    total_targets: int = 0
    targets_processed: int = 0
    links_found: int = 0
    successful_verifications: int = 0
    failed_verifications: int = 0
    bytes_transferred: int = 0
    errors: List[ErrorRecord] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)

    def record_success(self, bytes_read: int) -> None:
        self.successful_verifications += 1
        self.bytes_transferred += bytes_read

    def record_failure(self, url: str, error: str) -> None:
        self.failed_verifications += 1
        self.errors.append(ErrorRecord(url=url, error=error))

    def record_error(self, url: str, error: str) -> None:
        """Record a target-level error that is not a verification failure."""
        self.errors.append(ErrorRecord(url=url, error=error))

    @property
    def total_verifications(self) -> int:
        return self.successful_verifications + self.failed_verifications
