"""
Shared fixtures for the multisig tests.
"""

import json

import pytest


def lock(threshold, pubkeys):
    return {"pkh": {"threshold": threshold, "pubkeys": list(pubkeys)}}


@pytest.fixture
def make_note():
    def _make(value=100, threshold=2, pubkeys=("A", "B", "C"), first="alice", last="note-1"):
        return {
            "name": {"first": first, "last": last},
            "value": value,
            "lock": lock(threshold, pubkeys),
        }
    return _make


@pytest.fixture
def make_output():
    def _make(value=100, recipient="bob", threshold=1, pubkeys=("R",)):
        return {"recipient": recipient, "value": value, "lock": lock(threshold, pubkeys)}
    return _make


@pytest.fixture
def two_of_three_json(make_note, make_output):
    """Notes/outputs JSON for a single 2-of-{A,B,C} note of value 100 paid out in full."""
    return json.dumps([make_note()]), json.dumps([make_output()])
