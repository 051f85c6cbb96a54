"""
Testing practice generation
- Local randomness is injected (random.Random with a fixed seed)
- random.org is replaced with monkeypatch so no test touches the network
"""

import random

import requests

import mastermind.random_client as random_client
from mastermind.random_client import fetch_indices, generate_game_colors
from mastermind.types import ALL_COLORS


class _FakeResponse:
    def __init__(self, text: str, status_ok: bool = True):
        self.text = text
        self._ok = status_ok

    def raise_for_status(self):
        if not self._ok:
            raise requests.HTTPError("503 Service Unavailable")


def test_generate_game_colors_shapes():
    secret, palette = generate_game_colors(random.Random(42))
    assert len(palette) == 8
    assert len(set(palette)) == 8
    assert set(palette) <= set(ALL_COLORS)
    assert len(secret) == 5
    assert all(color in palette for color in secret)


def test_generate_game_colors_is_reproducible_with_same_rng_seed():
    assert generate_game_colors(random.Random(1)) == generate_game_colors(random.Random(1))


def test_fetch_indices_uses_random_org(monkeypatch):
    calls = []

    def fake_get(url, params, timeout):
        calls.append(params)
        return _FakeResponse("0\n3\n1\n7\n2\n")

    monkeypatch.setattr(random_client.requests, "get", fake_get)
    indices = fetch_indices(5, 8, random.Random(0), use_network=True)

    assert indices == [0, 3, 1, 7, 2]
    assert calls[0]["num"] == 5
    assert calls[0]["max"] == 7


def test_fetch_indices_falls_back_on_network_error(monkeypatch):
    def boom(url, params, timeout):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(random_client.requests, "get", boom)
    indices = fetch_indices(5, 8, random.Random(9), use_network=True)

    # Same as asking the local source directly
    assert indices == fetch_indices(5, 8, random.Random(9))


def test_fetch_indices_falls_back_on_bad_body(monkeypatch):
    monkeypatch.setattr(random_client.requests, "get", lambda url, params, timeout: _FakeResponse("1\n2\n"))
    indices = fetch_indices(5, 8, random.Random(2), use_network=True)
    assert len(indices) == 5
    assert all(0 <= i < 8 for i in indices)


def test_fetch_indices_falls_back_on_out_of_range(monkeypatch):
    monkeypatch.setattr(random_client.requests, "get", lambda url, params, timeout: _FakeResponse("0\n1\n2\n3\n9\n"))
    indices = fetch_indices(5, 8, random.Random(2), use_network=True)
    assert all(0 <= i < 8 for i in indices)


def test_fetch_indices_falls_back_on_http_error(monkeypatch):
    monkeypatch.setattr(
        random_client.requests, "get", lambda url, params, timeout: _FakeResponse("", status_ok=False)
    )
    assert fetch_indices(5, 8, random.Random(4), use_network=True) == fetch_indices(5, 8, random.Random(4))
