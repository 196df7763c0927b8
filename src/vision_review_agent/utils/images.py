"""
Image Ingestion
Reads image files for the conversation and checks them before a run starts.
"""

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..conversation.messages import ImageContent
from ..exceptions import ImageValidationError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "tiff": "image/tiff",
    "tif": "image/tiff",
}

# Image formats a Bedrock Converse image block accepts, keyed by MIME type
BEDROCK_IMAGE_FORMATS = {
    "image/jpeg": "jpeg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

# Pillow modes the PNG encoder writes as they are
PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


def get_mime_type(extension) -> str:
    """
    Map a file extension (or a path) to an image MIME type.

    Unknown extensions fall back to image/jpeg instead of failing.

    Args:
        extension: ".png", "PNG", "photo.png" or a Path

    Returns:
        MIME type string
    """
    value = str(extension)
    if "/" in value or "\\" in value or "." in value.lstrip("."):
        value = Path(value).suffix
    return MIME_TYPES.get(value.lower().lstrip("."), DEFAULT_MIME_TYPE)


def load_image(path) -> ImageContent:
    """
    Read an image file into ImageContent.

    Args:
        path: Path to the image

    Returns:
        ImageContent with the raw bytes and the extension-derived MIME type
    """
    path = Path(path)
    data = path.read_bytes()
    return ImageContent(data=data, mime_type=get_mime_type(path.suffix))


def validate_image(path) -> ImageContent:
    """
    Pre-flight check: load an image and make sure it decodes.

    Args:
        path: Path to the image

    Returns:
        ImageContent ready to go into the opening message

    Raises:
        ImageValidationError: If the file is missing, empty, unreadable or not an image
    """
    path = Path(path)
    if not path.is_file():
        raise ImageValidationError(f"Image file not found: {path}", path=path)

    try:
        image = load_image(path)
    except OSError as e:
        raise ImageValidationError(f"Cannot read image {path}: {e}", path=path) from e

    if image.size == 0:
        raise ImageValidationError(f"Image file is empty: {path}", path=path)

    try:
        with Image.open(io.BytesIO(image.data)) as img:
            img.verify()
            detected = img.format
        # verify() leaves the image unusable and skips pixel data
        with Image.open(io.BytesIO(image.data)) as img:
            img.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageValidationError(f"Not a readable image: {path} ({e})", path=path) from e

    if image.mime_type not in BEDROCK_IMAGE_FORMATS:
        try:
            _encode_png(image.data)
        except (OSError, ValueError) as e:
            raise ImageValidationError(f"Cannot convert {path} to PNG: {e}", path=path) from e

    logger.info(f"Loaded image {path.name}: {image.size} bytes, {image.mime_type} (detected {detected})")
    return image


def _encode_png(data: bytes) -> bytes:
    """Re-encode image bytes as PNG, converting modes PNG cannot store (CMYK, YCbCr)."""
    with Image.open(io.BytesIO(data)) as img:
        if img.mode not in PNG_MODES:
            img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
    return buffer.getvalue()


def to_bedrock_image(image: ImageContent) -> dict:
    """
    Convert ImageContent into a Bedrock/Strands image content block.

    JPEG, PNG, GIF and WebP pass through unchanged; anything else (BMP, TIFF)
    is re-encoded as PNG.

    Args:
        image: Image to convert

    Returns:
        {"image": {"format": ..., "source": {"bytes": ...}}}
    """
    image_format = BEDROCK_IMAGE_FORMATS.get(image.mime_type)
    data = image.data
    if image_format is None:
        logger.debug(f"Re-encoding {image.mime_type} image as PNG")
        data = _encode_png(image.data)
        image_format = "png"
    return {"image": {"format": image_format, "source": {"bytes": data}}}
