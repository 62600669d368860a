"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./boutique.db"

    # Service
    service_name: str = "boutique-ledger"
    log_level: str = "INFO"

    # Shop details printed on receipts and reports
    shop_name: str = "HIYA"
    shop_tagline: str = "Boutique de Mode & Location"
    shop_phone: str = "+213 XXX XXX XXX"
    currency: str = "DA"

    # Reporting
    top_n: int = 10
    low_stock_threshold: int = 5
    recent_sales_days: int = 30


settings = Settings()
