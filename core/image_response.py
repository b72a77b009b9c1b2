"""Normalisation of the image backend's response into a PNG data URL.

The backend answers in one of several shapes depending on the model. Each
shape is a separate type; ``classify`` picks the first one that matches, in
this order:

1. raw binary body
2. ``{"image": ...}``
3. ``{"result": {"image": ...}}``
4. ``{"data": ...}``
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, List, Union

from core.exceptions import GenerationError

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/png;base64,"

Payload = Union[str, bytes, List[int]]
BINARY_TYPES = (bytes, bytearray, memoryview)


@dataclass(frozen=True)
class RawImage:
    payload: bytes


@dataclass(frozen=True)
class ImageField:
    payload: Payload


@dataclass(frozen=True)
class ResultImage:
    payload: Payload


@dataclass(frozen=True)
class DataField:
    payload: Payload


ImageResponse = Union[RawImage, ImageField, ResultImage, DataField]


def _present(value: Any) -> bool:
    return value is not None and not (isinstance(value, (str, *BINARY_TYPES, list)) and len(value) == 0)


def classify(response: Any) -> ImageResponse:
    if isinstance(response, BINARY_TYPES):
        if not response:
            raise GenerationError("No response from AI model")
        return RawImage(bytes(response))

    if not response:
        raise GenerationError("No response from AI model")
    if not isinstance(response, dict):
        raise GenerationError(f"Unsupported AI response type: {type(response).__name__}")

    if _present(response.get("image")):
        return ImageField(response["image"])
    result = response.get("result")
    if isinstance(result, dict) and _present(result.get("image")):
        return ResultImage(result["image"])
    if _present(response.get("data")):
        return DataField(response["data"])

    keys = ", ".join(response.keys())
    raise GenerationError(f"No image data in AI response. Response keys: {keys}")


def _encode(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, BINARY_TYPES):
        return base64.b64encode(bytes(payload)).decode("ascii")
    if isinstance(payload, list):
        try:
            return base64.b64encode(bytes(payload)).decode("ascii")
        except (TypeError, ValueError) as e:
            raise GenerationError(f"Image data is not a byte sequence: {e}") from e
    raise GenerationError(f"Unsupported image payload type: {type(payload).__name__}")


def to_data_url(shape: ImageResponse) -> str:
    if isinstance(shape, RawImage):
        encoded = base64.b64encode(shape.payload).decode("ascii")
    elif isinstance(shape, (ImageField, ResultImage, DataField)):
        encoded = _encode(shape.payload)
    else:
        raise GenerationError(f"Unhandled image response shape: {type(shape).__name__}")
    return DATA_URL_PREFIX + encoded


def normalize(response: Any) -> str:
    shape = classify(response)
    logger.info("Image response shape: %s", type(shape).__name__)
    return to_data_url(shape)
