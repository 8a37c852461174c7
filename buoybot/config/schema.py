"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, model_validator


class StationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    station_id: str = "46026"
    title: str = "SF Buoy"
    feed_base_url: str = "https://www.ndbc.noaa.gov"
    # Byte window of the newest row in the realtime2 text feed
    record_start: int = Field(default=188, ge=0)
    record_end: int = Field(default=281, gt=0)
    timezone: str = "America/Los_Angeles"

    @model_validator(mode="after")
    def _window_is_ordered(self) -> "StationConfig":
        if self.record_end <= self.record_start:
            raise ValueError("record_end must be greater than record_start")
        return self


class FetchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    timeout_seconds: float = Field(default=30.0, gt=0.0)
    user_agent: str = "buoybot/0.1.0"


class PublisherConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = False
    api_base_url: str = "https://api.twitter.com"
    credentials_file: str = "config.json"
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    cycle_interval_minutes: int = Field(default=60, ge=1)


class BuoyBotConfig(BaseModel):
    model_config = {"extra": "forbid"}

    station: StationConfig = StationConfig()
    fetch: FetchConfig = FetchConfig()
    publisher: PublisherConfig = PublisherConfig()
    ops: OpsConfig = OpsConfig()


class PublisherCredentials(BaseModel):
    model_config = {"extra": "ignore"}

    bearer_token: str = Field(min_length=1)
