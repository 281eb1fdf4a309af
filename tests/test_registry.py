"""Tests for startup registration of vector features."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.exceptions import FeatureUnavailableError
from app.integrations.vector import registry
from app.integrations.vector.registry import VectorFeatures, register_vector_features


def test_missing_modules_reported():
    with patch("app.integrations.vector.registry.importlib.util.find_spec", return_value=None):
        assert registry.missing_modules() == ["sentence_transformers"]


def test_register_without_dependencies():
    with patch.object(registry, "missing_modules", return_value=["sentence_transformers"]):
        features = register_vector_features()
    assert not features.is_available()
    assert features.store is None
    with pytest.raises(FeatureUnavailableError, match="sentence_transformers"):
        features.require_store()


def test_register_with_dependencies():
    store = MagicMock()
    with patch.object(registry, "missing_modules", return_value=[]), \
         patch.object(registry.QdrantVectorStore, "from_settings", return_value=store):
        features = register_vector_features()
    assert features.is_available()
    assert features.require_store() is store


async def test_close_releases_store():
    store = MagicMock()
    store.close = AsyncMock()
    features = VectorFeatures(store=store)

    await features.close()

    store.close.assert_awaited_once()
    assert not features.is_available()
