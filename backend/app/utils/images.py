"""
Image helpers - loading local proof images and encoding them for upstream calls
"""
import base64
import logging
import os

logger = logging.getLogger(__name__)


def load_local_image(file_path: str) -> bytes:
    """
    Load image from local file path

    Args:
        file_path: Path to local image file

    Returns:
        Image bytes

    Raises:
        FileNotFoundError if the file doesn't exist
        OSError if it can't be read
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Proof image not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return f.read()
    except OSError as e:
        logger.error(f"Failed to read local image: {e}")
        raise


def image_to_base64(image_bytes: bytes) -> str:
    """
    Convert image bytes to base64 string

    Args:
        image_bytes: Raw image bytes

    Returns:
        Base64 encoded string
    """
    return base64.b64encode(image_bytes).decode('utf-8')


def to_data_url(image_base64: str, media_type: str) -> str:
    """Wrap a base64 payload as a data URL"""
    return f"data:{media_type};base64,{image_base64}"
