from __future__ import annotations

import base64

import pytest

from conftest import PNG_BYTES
from core.exceptions import GenerationError
from core.image_response import (
    DataField,
    ImageField,
    RawImage,
    ResultImage,
    classify,
    normalize,
)

ENCODED = base64.b64encode(PNG_BYTES).decode("ascii")
DATA_URL = f"data:image/png;base64,{ENCODED}"


@pytest.mark.parametrize(
    "response",
    [
        PNG_BYTES,
        bytearray(PNG_BYTES),
        {"image": PNG_BYTES},
        {"image": list(PNG_BYTES)},
        {"image": ENCODED},
        {"result": {"image": ENCODED}},
        {"result": {"image": PNG_BYTES}},
        {"data": PNG_BYTES},
        {"data": list(PNG_BYTES)},
    ],
)
def test_supported_shapes_normalize_to_png_data_url(response):
    assert normalize(response) == DATA_URL


def test_classify_follows_priority_order():
    assert isinstance(classify(PNG_BYTES), RawImage)
    assert isinstance(classify({"image": "a", "result": {"image": "b"}, "data": b"c"}), ImageField)
    assert isinstance(classify({"result": {"image": "b"}, "data": b"c"}), ResultImage)
    assert isinstance(classify({"data": b"c"}), DataField)


def test_image_field_wins_over_result_and_data():
    response = {"image": "first", "result": {"image": "second"}, "data": b"third"}

    assert normalize(response) == "data:image/png;base64,first"


def test_result_without_image_falls_through_to_data():
    response = {"result": {"status": "done"}, "data": PNG_BYTES}

    assert normalize(response) == DATA_URL


@pytest.mark.parametrize("response", [None, {}, b""])
def test_empty_response_is_rejected(response):
    with pytest.raises(GenerationError, match="No response from AI model"):
        classify(response)


def test_unrecognized_shape_lists_keys():
    with pytest.raises(GenerationError) as exc_info:
        normalize({"output": "x", "success": True})

    assert str(exc_info.value) == "No image data in AI response. Response keys: output, success"


def test_non_byte_list_is_rejected():
    with pytest.raises(GenerationError, match="not a byte sequence"):
        normalize({"data": [1, 2, 999]})
