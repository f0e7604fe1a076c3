"""Tests for image encoding and JSON extraction helpers."""

import base64
import json

import pytest

from plant_tracker.services.images import encode_image, from_base64
from plant_tracker.services.parsing import extract_json_object


def test_encode_image_uses_png_header() -> None:
    image = encode_image(b"\x89PNG\r\n\x1a\n" + b"rest")

    assert image.data_url.startswith("data:image/png;base64,")


def test_encode_image_defaults_to_jpeg() -> None:
    image = encode_image(b"unknown")

    assert image.mime_type == "image/jpeg"
    assert base64.b64decode(image.base64) == b"unknown"


def test_from_base64_strips_data_url_prefix_and_detects_webp() -> None:
    raw = b"RIFF\x00\x00\x00\x00WEBPVP8 "
    encoded = base64.b64encode(raw).decode()

    image = from_base64(f"data:image/webp;base64,{encoded}")

    assert image.base64 == encoded
    assert image.mime_type == "image/webp"


def test_from_base64_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        from_base64("abcde")


def test_extract_json_object_spans_lines() -> None:
    text = 'Answer:\n```json\n{\n  "isPlant": true,\n  "confidence": 0.7\n}\n```'

    assert extract_json_object(text) == {"isPlant": True, "confidence": 0.7}


def test_extract_json_object_without_braces_returns_none() -> None:
    assert extract_json_object("no json here") is None


def test_extract_json_object_raises_on_malformed_json() -> None:
    with pytest.raises(json.JSONDecodeError):
        extract_json_object("{not: valid}")


def test_from_base64_rejects_corruption_past_the_header() -> None:
    encoded = base64.b64encode(b"\xff\xd8\xff" + b"x" * 120).decode()
    corrupted = encoded[:100] + "!!!!" + encoded[104:]

    with pytest.raises(ValueError, match="not valid base64"):
        from_base64(corrupted)


def test_from_base64_drops_line_breaks() -> None:
    encoded = base64.b64encode(b"\x89PNG\r\n\x1a\n" + b"y" * 90).decode()
    wrapped = encoded[:76] + "\n" + encoded[76:]

    image = from_base64(wrapped)

    assert image.base64 == encoded
    assert image.mime_type == "image/png"
