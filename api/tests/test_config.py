import dataclasses

import pytest

from codecompass.core import config
from codecompass.core.config import Config, RefinementConfig, settings


def test_defaults_snapshot():
    snapshot = Config().refinement_config()
    assert isinstance(snapshot, RefinementConfig)
    assert snapshot.collection_name == settings.COLLECTION_NAME
    assert snapshot.default_limit == settings.QDRANT_SEARCH_LIMIT_DEFAULT
    assert snapshot.max_refinement_iterations == settings.MAX_REFINEMENT_ITERATIONS
    assert snapshot.relevance_threshold == settings.RELEVANCE_THRESHOLD


def test_snapshot_is_immutable():
    snapshot = settings.refinement_config()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.relevance_threshold = 0.1


def test_snapshot_reflects_overrides():
    custom = Config(COLLECTION_NAME="other", MAX_REFINEMENT_ITERATIONS=5)
    snapshot = custom.refinement_config()
    assert snapshot.collection_name == "other"
    assert snapshot.max_refinement_iterations == 5


def test_env_int_parsing(monkeypatch):
    monkeypatch.setenv("CC_TEST_INT", "7")
    assert config._env_int("CC_TEST_INT", 3) == 7
    monkeypatch.setenv("CC_TEST_INT", "seven")
    assert config._env_int("CC_TEST_INT", 3) == 3
    monkeypatch.setenv("CC_TEST_INT", " ")
    assert config._env_int("CC_TEST_INT", 3) == 3
    monkeypatch.delenv("CC_TEST_INT")
    assert config._env_int("CC_TEST_INT", 3) == 3


def test_env_float_parsing(monkeypatch, caplog):
    monkeypatch.setenv("CC_TEST_FLOAT", "0.6")
    assert config._env_float("CC_TEST_FLOAT", 0.75) == 0.6
    monkeypatch.setenv("CC_TEST_FLOAT", "high")
    assert config._env_float("CC_TEST_FLOAT", 0.75) == 0.75
    assert "CC_TEST_FLOAT" in caplog.text
