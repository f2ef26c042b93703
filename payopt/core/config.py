"""Application configuration loaded from environment variables."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with defaults and env var overrides."""

    # App
    app_env: str = "development"
    app_port: int = 8000
    log_level: str = "INFO"

    # Loyalty points
    points_method_id: str = "PUNKTY"

    # Partial-points combo (Option C)
    combo_min_points_percent: int = Field(10, ge=0, le=100)
    combo_discount_percent: int = Field(10, ge=0, le=100)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @model_validator(mode="after")
    def _combo_fits_in_order(self) -> "Settings":
        # the minimum points share must fit in what is left after the discount
        if self.combo_min_points_percent + self.combo_discount_percent > 100:
            raise ValueError(
                "combo_min_points_percent + combo_discount_percent must not "
                f"exceed 100 (got {self.combo_min_points_percent} + "
                f"{self.combo_discount_percent})"
            )
        return self


settings = Settings()
