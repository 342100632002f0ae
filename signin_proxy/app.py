"""
Flask integration for the sign-in provider registry.

This module builds a Flask application with logging, the provider registry, the
authlib OAuth clients and the normalization pipeline wired together. It registers
no routes; the host application owns routing and sessions.
"""

from typing import Dict, Optional
import logging
import sys
from flask import Flask, current_app, request

from .config import Config, get_config
from .pipeline import NormalizationPipeline
from .providers import ProviderRegistry, ProviderHTTPClient


def _configure_logging(debug: bool) -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # OAuth client libraries are noisy below WARNING outside debug mode
    logging.getLogger('authlib').setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger('requests').setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def create_app(config: Optional[Config] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Optional configuration; the process configuration is loaded when omitted

    Returns:
        Flask application with the registry and pipeline in app.extensions

    Raises:
        ConfigurationError: If configuration is invalid
    """
    config = config or get_config()
    flask_config = config.get_flask_config()

    app = Flask(__name__)
    app.config.update(flask_config)
    app.config['SIGNIN_CONFIG'] = config

    _configure_logging(flask_config.get('DEBUG', False))

    registry = ProviderRegistry.from_config(config)
    registry.init_app(app)

    http_client = ProviderHTTPClient(timeout=config.get_http_timeout())
    app.extensions['signin_pipeline'] = NormalizationPipeline(registry, http_client=http_client)

    app.logger.info(f"Sign-in providers enabled: {', '.join(registry.provider_ids) or 'none'}")
    return app


def get_registry() -> ProviderRegistry:
    return current_app.extensions['signin_registry']


def get_pipeline() -> NormalizationPipeline:
    return current_app.extensions['signin_pipeline']


def preflight(provider_id: str) -> Dict[str, str]:
    """
    Run a provider's pre-flow hook against the current Flask request.

    The redirect target for a rejected request is the 'redirectTo' query parameter
    when it points at an allowed client URL, and AUTH_CLIENT_URL otherwise.

    Args:
        provider_id: Provider identifier

    Returns:
        Dynamic parameters to pass to authlib's authorize_redirect()

    Raises:
        NotFoundError: If the provider is unknown or not configured
        ValidationError: If the provider rejects the request
    """
    config = current_app.config['SIGNIN_CONFIG']
    redirect_to = request.args.get('redirectTo')
    if not config.is_allowed_redirect(redirect_to):
        if redirect_to:
            current_app.logger.warning(f"Ignoring redirectTo outside the allowed client URLs: {redirect_to}")
        redirect_to = config.get_default_redirect_url()
    return get_registry().preflight(provider_id, request.args, redirect_to=redirect_to)
