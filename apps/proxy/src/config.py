from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Load apps/proxy/.env and accept env keys in any case
    _env_file = Path(__file__).resolve().parent.parent / ".env"
    model_config = SettingsConfigDict(env_file=str(_env_file), extra="ignore", case_sensitive=False)

    app_name: str = "Weather Proxy"
    app_version: str = "0.1.0"
    debug: bool = False
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    port: int = 8000

    # OpenWeatherMap
    openweather_api_key: str = Field(default="", description="API key sent as `appid` on every upstream call.")
    openweather_base_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="Base URL for the OpenWeatherMap 2.5 API (the /weather and /forecast endpoints live under it).",
    )
    openweather_timeout: float = Field(default=10.0, ge=1.0, description="Timeout in seconds for upstream weather calls")
    weather_user_agent: str = Field(
        default="WeatherProxy/0.1.0",
        description="User-Agent sent to the upstream weather provider.",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def normalize_cors(cls, v):
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                import json
                return json.loads(s)
            if s in ("", "*"):
                return ["*"]
            return [p.strip() for p in s.split(",")]
        return v

    @field_validator("openweather_base_url")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        return v.rstrip("/")

settings = Settings()
