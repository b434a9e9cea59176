"""Tests for golink/images.py — image URL selection and upscaling."""

import json

from golink.images import is_amazon_image, normalize_image, pick_largest, upscale


def test_upscale_rewrites_size_tokens():
    url = "https://m.media-amazon.com/images/I/81abc._AC_SX679_.jpg"
    assert upscale(url) == "https://m.media-amazon.com/images/I/81abc._AC_SL1500_.jpg"


def test_upscale_leaves_foreign_urls_alone():
    url = "https://example.com/img._SX300_.jpg"
    assert upscale(url) == url


def test_pick_largest_by_sx_token():
    blob = json.dumps({
        "https://m.media-amazon.com/images/I/81abc._SX300_.jpg": [300, 300],
        "https://m.media-amazon.com/images/I/81abc._SX679_.jpg": [679, 679],
        "https://m.media-amazon.com/images/I/81abc._SX425_.jpg": [425, 425],
    })
    assert pick_largest(blob) == "https://m.media-amazon.com/images/I/81abc._SX679_.jpg"


def test_pick_largest_uses_dimensions_without_size_token():
    blob = json.dumps({
        "https://m.media-amazon.com/images/I/small.jpg": [200, 200],
        "https://m.media-amazon.com/images/I/big.jpg": [1200, 900],
    })
    assert pick_largest(blob) == "https://m.media-amazon.com/images/I/big.jpg"


def test_pick_largest_broken_json_takes_first_quoted_url():
    blob = '{"https://m.media-amazon.com/images/I/81abc.jpg": [300, 300'
    assert pick_largest(blob) == "https://m.media-amazon.com/images/I/81abc.jpg"


def test_normalize_image_from_blob():
    blob = json.dumps({
        "https://m.media-amazon.com/images/I/81abc._SX300_.jpg": [300, 300],
        "https://m.media-amazon.com/images/I/81abc._SX679_.jpg": [679, 679],
    })
    assert normalize_image(blob) == "https://m.media-amazon.com/images/I/81abc._AC_SL1500_.jpg"


def test_normalize_image_empty():
    assert normalize_image(None) is None
    assert normalize_image("") is None
    assert normalize_image("{}") is None


def test_is_amazon_image():
    assert is_amazon_image("https://images-na.ssl-images-amazon.com/images/P/B0.jpg")
    assert is_amazon_image("https://m.media-amazon.com/images/I/x.jpg")
    assert not is_amazon_image("https://example.com/x.jpg")
    assert not is_amazon_image(None)
