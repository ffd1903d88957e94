from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional

class Settings(BaseSettings):
    # Supabase
    supabase_url: str
    supabase_key: str

    # Redis
    redis_url: str = "redis://localhost:6379"

    # Environment
    environment: str = "development"
    log_level: str = "INFO"
    app_url: str = "http://localhost:8000"

    # Twilio SMS gateway (checked at delivery time, not at startup)
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_from_number: Optional[str] = None
    twilio_status_callback_url: Optional[str] = None
    twilio_base_url: str = "https://api.twilio.com/2010-04-01"
    sms_timeout: float = 10.0
    sms_max_retries: int = 3

    # Mail transport
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    mail_from_address: Optional[str] = None
    mail_from_name: str = "Bunge Participation"
    mail_timeout: float = 10.0

    # Queued jobs
    job_max_attempts: int = 3
    job_retry_intervals: List[int] = [30, 120, 600]
    job_timeout: int = 600
    notification_chunk_size: int = 200

    # Scheduler
    scheduler_poll_interval: float = 30.0
    scheduler_timezone: str = "UTC"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
