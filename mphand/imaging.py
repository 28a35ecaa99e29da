"""
Image conversion between data URLs and RGB pixel buffers.
"""
import base64
import binascii
from typing import Tuple
from urllib.parse import unquote_to_bytes

import cv2
import numpy as np

from .types import ImageDecodeError


DETECTION_SIZE = (480, 360)  # (width, height)


def data_url_to_bytes(data_url: str) -> bytes:
    """
    Extract the payload of a data URL.

    Accepts base64 and percent-encoded payloads; a bare base64 string
    without the ``data:`` header is accepted too.
    """
    header, sep, payload = data_url.partition(',')
    if not sep:
        header, payload = "", data_url
    try:
        if not header or ';base64' in header:
            return base64.b64decode(payload, validate=False)
        return unquote_to_bytes(payload)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid data URL payload: {e}") from e


def decode_data_url(data_url: str, size: Tuple[int, int] = DETECTION_SIZE) -> np.ndarray:
    """
    Decode an encoded image into an RGB buffer of a fixed size.

    Args:
        data_url: PNG/JPEG image as a data URL
        size: Output (width, height); the image is stretched to fill it

    Returns:
        HxWx3 uint8 RGB array
    """
    img_bytes = data_url_to_bytes(data_url)
    nparr = np.frombuffer(img_bytes, np.uint8)
    frame = cv2.imdecode(nparr, cv2.IMREAD_COLOR) if nparr.size else None
    if frame is None:
        raise ImageDecodeError("Could not decode image data")

    if (frame.shape[1], frame.shape[0]) != size:
        frame = cv2.resize(frame, size, interpolation=cv2.INTER_AREA)
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


def encode_data_url(image_rgb: np.ndarray, fmt: str = "png") -> str:
    """Encode an RGB buffer as a data URL."""
    bgr = cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR)
    ok, buffer = cv2.imencode(f".{fmt}", bgr)
    if not ok:
        raise ImageDecodeError(f"Could not encode image as {fmt}")
    mime = "jpeg" if fmt in ("jpg", "jpeg") else fmt
    encoded = base64.b64encode(buffer.tobytes()).decode('utf-8')
    return f"data:image/{mime};base64,{encoded}"
