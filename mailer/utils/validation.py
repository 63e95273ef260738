# mailer/utils/validation.py
import re

EMAIL_PATTERN = re.compile(
    r'^[a-zA-Z0-9.!#$%&\'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$'
)

def validate_email(email: str) -> bool:
    """Validate e-mail format. Case is left alone, Loops normalizes it."""
    if not email or len(email) > 254:
        return False
    
    if not EMAIL_PATTERN.match(email):
        return False
    
    local, domain = email.rsplit('@', 1)
    if len(local) > 64 or len(domain) > 253:
        return False
    
    return True

def is_scalar(value) -> bool:
    """Only scalars can be stored as Loops contact properties"""
    return value is None or isinstance(value, (str, int, float, bool))
