from decimal import Decimal

from pydantic_settings import BaseSettings

from src.models.mortgage import AmortizationSystem


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # App
    app_name: str = "Mortgage Simulator"
    debug: bool = False
    log_level: str = "INFO"

    # Engine
    # Used when a request or CLI call does not name a system
    default_amortization_system: AmortizationSystem = AmortizationSystem.SAC
    # Balance at or below which a simulated loan counts as paid off
    payoff_threshold: Decimal = Decimal("0.01")


settings = Settings()
