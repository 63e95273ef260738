# mailer/captcha/__init__.py
from .recaptcha import (
    RecaptchaVerifier,
    NoCaptchaVerifier,
    get_captcha_verifier,
    captcha_configuration
)

__all__ = [
    'RecaptchaVerifier',
    'NoCaptchaVerifier',
    'get_captcha_verifier',
    'captcha_configuration'
]
