# ecogest/core/config.py
"""Application configuration using Pydantic."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    database_url: str
    redis_url: str = 'redis://localhost:6379/0'
    jwt_secret_key: str
    jwt_algorithm: str = 'HS256'
    access_token_expire_minutes: int = 60 * 12

    app_name: str = 'ecogest'
    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'info'
    allowed_origins: List[str] = ['*']
    cache_enabled: bool = True

    # Login identifiers are stored as Prof003@ecole-best.<auth_email_domain>
    auth_email_domain: str = 'ecogest.app'
    default_trial_days: int = 30

    # PayTech gateway
    paytech_api_key: Optional[str] = None
    paytech_api_secret: Optional[str] = None
    paytech_env: str = 'test'
    paytech_base_url: str = 'https://paytech.sn/api'
    paytech_timeout: float = 30.0
    site_url: str = 'https://app.ecogest.com'
    public_api_url: str = 'http://localhost:8000'

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }


settings = Settings()
