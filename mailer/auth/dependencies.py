# mailer/auth/dependencies.py
from fastapi import Depends, Header, Request
from typing import Optional
from mailer.auth.tokens import TokenService
from mailer.errors import UnauthorizedError

def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service

async def get_authenticated_email(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service)
) -> str:
    """E-mail address of the subscriber holding the bearer token"""
    if not authorization:
        raise UnauthorizedError("missing-token")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise UnauthorizedError("missing-token", details="Malformed Authorization header")

    # Tokens are only valid on the host that issued them
    return tokens.validate_token(parts[1], request.url.hostname)
