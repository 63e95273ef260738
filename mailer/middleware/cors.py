from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mailer.config import Settings

def setup_cors(app: FastAPI, settings: Settings):
    """Configure CORS for the API.

    CORS_ORIGIN is a whitespace separated allow-list. When unset any origin is
    reflected back, the widget is meant to be embedded on arbitrary sites.
    """
    origins = settings.cors_origin.split() if settings.cors_origin else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=None if origins else ".*",
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
        expose_headers=["Content-Type"]
    )
