"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from tests.conftest import FakeEmbeddingProvider
from vaguefinder import cli as cli_module
from vaguefinder.cli import cli
from vaguefinder.finder import VagueFinder


@pytest.fixture
def runner(monkeypatch):
    """CLI runner wired to an in-memory provider."""
    monkeypatch.setattr(
        cli_module.VagueFinder,
        "from_settings",
        classmethod(lambda cls, settings: VagueFinder(FakeEmbeddingProvider())),
    )
    return CliRunner()


class TestCli:
    """Tests for CLI commands."""
    
    def test_compare_json(self, runner):
        result = runner.invoke(cli, ["compare", "hello world", "hello world", "--json-output"], obj={})
        
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["text_a"] == "hello world"
        assert data["score"] == pytest.approx(1.0)
    
    def test_rank_json(self, runner):
        result = runner.invoke(
            cli,
            ["rank", "a sentence about cats", "-i", "unrelated gibberish xyz",
             "-i", "a sentence about cats", "--json-output"],
            obj={},
        )
        
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [r["text"] for r in data["results"]] == ["a sentence about cats", "unrelated gibberish xyz"]
    
    def test_rank_cached_table(self, runner, tmp_path):
        items = tmp_path / "items.txt"
        items.write_text("a sentence about dogs\na sentence about cats\n")
        
        result = runner.invoke(cli, ["rank", "cats", "--items-file", str(items), "--cached"], obj={})
        
        assert result.exit_code == 0, result.output
        assert "a sentence about cats" in result.output
    
    def test_top(self, runner):
        result = runner.invoke(
            cli,
            ["top", "cats", "-k", "1", "-i", "dogs", "-i", "cats", "--json-output"],
            obj={},
        )
        
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [r["text"] for r in data["results"]] == ["cats"]
    
    def test_top_invalid_k(self, runner):
        result = runner.invoke(cli, ["top", "cats", "-k", "0", "-i", "dogs", "--json-output"], obj={})
        
        assert result.exit_code == 1
        assert "k must be greater than 0" in result.output
    
    def test_missing_items(self, runner):
        result = runner.invoke(cli, ["rank", "cats"], obj={})
        
        assert result.exit_code == 2
    
    def test_malformed_items_file(self, runner, tmp_path):
        items = tmp_path / "items.yaml"
        items.write_text("cats: 1\n")
        
        result = runner.invoke(cli, ["rank", "cats", "--items-file", str(items)], obj={})
        
        assert result.exit_code == 2
        assert "--items-file" in result.output
        assert "YAML list" in result.output
