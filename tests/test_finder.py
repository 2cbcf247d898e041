"""Tests for the VagueFinder handle."""

import asyncio

import pytest

from tests.conftest import FakeEmbeddingProvider
from vaguefinder.config import Settings
from vaguefinder.matching.embeddings import LocalEmbeddingProvider, OllamaEmbeddingProvider
from vaguefinder.errors import InvalidCacheEntryError, InvalidKError, ModelNotLoadedError, ProviderLoadError
from vaguefinder.finder import VagueFinder
from vaguefinder.models import LoadStatus


class SlowLoadingProvider(FakeEmbeddingProvider):
    async def load(self, on_progress=None):
        await asyncio.sleep(1.0)


class TestLoading:
    """Tests for load and progress reporting."""
    
    @pytest.mark.asyncio
    async def test_load_reports_progress(self, unloaded_provider):
        finder = VagueFinder(unloaded_provider)
        seen = []
        finder.subscribe(seen.append)
        
        assert finder.get_progress() is None
        await finder.load()
        
        assert finder.is_loaded
        assert [s.status for s in seen] == [LoadStatus.PROGRESS, LoadStatus.READY]
        assert finder.get_progress().status == LoadStatus.READY
    
    @pytest.mark.asyncio
    async def test_unsubscribe(self, unloaded_provider):
        finder = VagueFinder(unloaded_provider)
        seen = []
        unsubscribe = finder.subscribe(seen.append)
        unsubscribe()
        
        await finder.load()
        
        assert seen == []
        assert finder.get_progress() is not None
    
    @pytest.mark.asyncio
    async def test_load_timeout(self):
        finder = VagueFinder(SlowLoadingProvider(), load_timeout=0.01)
        
        with pytest.raises(ProviderLoadError):
            await finder.load()
        assert not finder.is_loaded
    
    @pytest.mark.asyncio
    async def test_independent_instances(self):
        first = VagueFinder(FakeEmbeddingProvider())
        second = VagueFinder(FakeEmbeddingProvider())
        
        await first.load()
        
        assert first.is_loaded
        assert not second.is_loaded
        assert second.get_progress() is None
        with pytest.raises(ModelNotLoadedError):
            await second.compare_two("a", "b")
    
    def test_from_settings(self):
        finder = VagueFinder.from_settings(Settings(provider="ollama", embed_timeout=5.0))
        
        assert isinstance(finder.provider, OllamaEmbeddingProvider)
        assert finder.orchestrator.embed_timeout == 5.0
        
        finder = VagueFinder.from_settings(Settings(provider="local", model_name="fast"))
        assert isinstance(finder.provider, LocalEmbeddingProvider)
        assert finder.provider.model_name == "all-MiniLM-L6-v2"


class TestOperations:
    """Tests for the public comparison operations."""
    
    @pytest.mark.asyncio
    async def test_compare_two(self, finder):
        result = await finder.compare_two("a sentence about cats", "a sentence about dogs")
        
        assert 0.0 < result.score < 1.0
    
    @pytest.mark.asyncio
    async def test_example_ranking(self, finder, sample_items):
        result = await finder.rank_all("a sentence about cats", sample_items)
        
        assert result.results[0].text == "a sentence about cats"
        assert result.results[0].score == pytest.approx(1.0)
        assert result.results[-1].text == "unrelated gibberish xyz"
    
    @pytest.mark.asyncio
    async def test_rank_all_is_sorted_permutation(self, finder, sample_items):
        unsorted = await finder.compare_to_many("a sentence about dogs", sample_items)
        ranked = await finder.rank_all("a sentence about dogs", sample_items)
        
        assert sorted(ranked.texts()) == sorted(unsorted.texts())
        assert ranked.results == sorted(unsorted.results, key=lambda r: r.score, reverse=True)
    
    @pytest.mark.asyncio
    async def test_compare_to_many_does_not_mutate_items(self, finder, sample_items):
        items = list(sample_items)
        before = list(items)
        
        result = await finder.compare_to_many("cats", items)
        
        assert items == before
        assert result.results is not items
    
    @pytest.mark.asyncio
    async def test_cached_round(self, finder, provider, sample_items):
        entries = await finder.precompute(sample_items)
        snapshot = [e.model_copy(deep=True) for e in entries]
        provider.calls.clear()
        
        in_order = await finder.compare_to_cached("a sentence about dogs", entries)
        ranked = await finder.rank_cached("a sentence about dogs", entries)
        
        assert in_order.texts() == sample_items
        assert ranked.results[0].text == "a sentence about dogs"
        assert provider.calls == ["a sentence about dogs"] * 2
        assert entries == snapshot
    
    @pytest.mark.asyncio
    async def test_cached_invalid_entry(self, finder):
        with pytest.raises(InvalidCacheEntryError):
            await finder.rank_cached("cats", [{"embedding": [0.1, 0.2]}])
    
    @pytest.mark.asyncio
    async def test_top_k(self, finder, sample_items):
        top = await finder.top_k("a sentence about cats", sample_items, 2)
        ranked = await finder.rank_all("a sentence about cats", sample_items)
        
        assert top.results == ranked.results[:2]
        assert len((await finder.top_k("cats", sample_items, 99)).results) == 3
    
    @pytest.mark.asyncio
    async def test_top_k_invalid(self, finder, provider, sample_items):
        with pytest.raises(InvalidKError):
            await finder.top_k("cats", sample_items, 0)
        assert provider.calls == []
    
    @pytest.mark.asyncio
    async def test_all_operations_require_load(self, unloaded_provider, sample_items):
        finder = VagueFinder(unloaded_provider)
        
        for call in (
            finder.compare_two("a", "b"),
            finder.compare_to_many("a", sample_items),
            finder.rank_all("a", sample_items),
            finder.precompute(sample_items),
            finder.compare_to_cached("a", [{"text": "b", "embedding": [1.0]}]),
            finder.rank_cached("a", [{"text": "b", "embedding": [1.0]}]),
            finder.top_k("a", sample_items, 1),
        ):
            with pytest.raises(ModelNotLoadedError):
                await call
        assert unloaded_provider.calls == []
    
    @pytest.mark.asyncio
    async def test_context_manager_closes_provider(self, provider):
        async with VagueFinder(provider) as finder:
            assert finder.is_loaded
        
        assert not provider.is_loaded
