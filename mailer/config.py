# mailer/config.py
from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Loops (contact directory)
    loops_so_secret: str
    loops_api_url: str = "https://app.loops.so/api/v1"
    loops_timeout: float = 10.0
    
    # Magic link tokens
    jwt_secret: Optional[str] = None
    jwt_expire_days: int = 365  # no refresh mechanism, keep it long
    
    # CAPTCHA
    captcha_provider: str = "recaptcha"  # recaptcha or none
    recaptcha_site_key: str = ""
    recaptcha_secret: Optional[str] = None
    captcha_threshold: float = 0.5
    
    # Company identity used in confirmation e-mails
    company_name: str = ""
    company_address: str = ""
    company_logo: Optional[str] = None
    
    # App Settings
    cors_origin: Optional[str] = None  # whitespace separated
    environment: str = "development"
    
    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
