from pydantic import BaseModel, Field


class SnapshotConfig(BaseModel):
    # attribute written on every element that was given a ref
    marker_attribute: str = "aria-ref"
    max_iframe_depth: int = Field(default=5, ge=0)
    max_name_length: int = Field(default=900, gt=0)


class StabilizationConfig(BaseModel):
    dom_content_loaded_timeout_ms: int = Field(default=3000, ge=0)
    load_timeout_ms: int = Field(default=5000, ge=0)
    settle_delay_ms: int = Field(default=1000, ge=0)


class NavigationRetryConfig(BaseModel):
    base_timeout_ms: int = Field(default=15000, gt=0)
    # upper bound for any single attempt
    max_timeout_ms: int = Field(default=60000, gt=0)
    # total attempts, including the first one
    max_attempts: int = Field(default=3, ge=1)
    timeout_multiplier: float = Field(default=2, gt=0)


def calculate_timeout(attempt: int, config: NavigationRetryConfig) -> int:
    """
    Timeout for the given 1-based attempt, growing geometrically and capped at
    `max_timeout_ms`. With the defaults: 15s, 30s, 60s.
    """
    calculated = round(config.base_timeout_ms * config.timeout_multiplier ** (attempt - 1))
    return min(calculated, config.max_timeout_ms)


class ValidatorConfig(BaseModel):
    max_wait_seconds: int = Field(default=30, ge=0)


class PageConfig(BaseModel):
    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig)
    stabilization: StabilizationConfig = Field(default_factory=StabilizationConfig)
    navigation: NavigationRetryConfig = Field(default_factory=NavigationRetryConfig)
    screenshot_timeout_s: float = 5.0
