"""
Dependency injection for shared clients and resources
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request

from app.core.config import Settings
from app.core.exceptions import ConfigurationError
from app.services.external.inference import InferenceClient, create_inference_client

logger = logging.getLogger(__name__)


def init_inference_client(app: FastAPI, app_settings: Settings) -> Optional[InferenceClient]:
    """Build the upstream client once at startup and attach it to app state"""
    try:
        config = app_settings.inference_config()
        client = create_inference_client(config)
        logger.info(f"✓ Inference client ready ({config.provider}, {config.model})")
    except ConfigurationError as e:
        logger.warning(f"Inference client not configured: {e}")
        client = None
    app.state.inference_client = client
    return client


def get_inference_client(request: Request) -> Optional[InferenceClient]:
    """Get the inference client built at startup (None if unconfigured)"""
    return getattr(request.app.state, "inference_client", None)
