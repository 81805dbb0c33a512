"""
Тесты кэша скомпилированных шаблонов.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

import vingo
from vingo.cache import TemplateCache
from vingo.config import EngineConfig
from vingo.errors import TemplateFileError
from vingo.template import ParserError

from tests.infrastructure.file_utils import touch_ns, write

BASE_NS = 1_600_000_000_000_000_000


class TestTemplateCache:

    def test_render_file(self, cache, tmpl):
        path = tmpl("Hello <{name}>")
        assert cache.render(path, {"name": "Ann"}) == "Hello Ann"

    def test_unchanged_file_reuses_ast(self, cache, tmpl):
        path = tmpl("v1")
        first = cache.get_or_compile(path)
        second = cache.get_or_compile(path)

        assert second is first
        assert cache.snapshot().entries == 1

    def test_same_mtime_keeps_stale_ast(self, cache, tmpl):
        """Содержимое изменилось, а время модификации нет — используется старый AST"""
        path = tmpl("original")
        touch_ns(path, BASE_NS)
        assert cache.render(path) == "original"

        write(path, "rewritten")
        touch_ns(path, BASE_NS)
        assert cache.render(path) == "original"

    def test_changed_mtime_recompiles(self, cache, tmpl):
        path = tmpl("v1 <{x}>")
        touch_ns(path, BASE_NS)
        assert cache.render(path, {"x": 1}) == "v1 1"

        write(path, "v2 <{x}>")
        touch_ns(path, BASE_NS + 1)
        assert cache.render(path, {"x": 1}) == "v2 1"
        assert cache.get_or_compile(path).mtime_ns == BASE_NS + 1
        assert cache.snapshot().entries == 1

    def test_no_reread_on_hit(self, cache, tmpl, monkeypatch):
        path = tmpl("cached")
        cache.render(path)

        def fail(*args, **kwargs):
            raise AssertionError("file was re-read")

        monkeypatch.setattr(Path, "read_text", fail)
        assert cache.render(path) == "cached"

    def test_relative_and_absolute_paths_share_entry(self, cache, tmpl, tmp_path, monkeypatch):
        path = tmpl("same", name="sub/page.vgo")
        monkeypatch.chdir(tmp_path)

        first = cache.get_or_compile("sub/page.vgo")
        second = cache.get_or_compile(str(path))
        third = cache.get_or_compile(tmp_path / "sub" / ".." / "sub" / "page.vgo")

        assert first is second is third
        assert first.path == path.resolve()

    def test_missing_file(self, cache, tmp_path):
        with pytest.raises(TemplateFileError) as exc:
            cache.render(tmp_path / "nope.vgo")

        assert "nope.vgo" in str(exc.value)
        assert cache.snapshot().entries == 0

    def test_directory_is_not_a_template(self, cache, tmp_path):
        with pytest.raises(TemplateFileError):
            cache.render(tmp_path)

    def test_undecodable_file(self, cache, tmp_path):
        path = tmp_path / "bin.vgo"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(TemplateFileError):
            cache.render(path)

    def test_parse_error_leaves_cache_untouched(self, cache, tmpl):
        path = tmpl("<{if x}>never closed")

        with pytest.raises(ParserError):
            cache.render(path)
        assert cache.snapshot().entries == 0

    def test_parse_error_after_edit_keeps_previous_entry(self, cache, tmpl):
        path = tmpl("good")
        touch_ns(path, BASE_NS)
        good = cache.get_or_compile(path)

        write(path, "<{for x}>bad<{/for}>")
        touch_ns(path, BASE_NS + 5)
        with pytest.raises(ParserError):
            cache.get_or_compile(path)

        assert cache.snapshot().entries == 1
        touch_ns(path, BASE_NS)
        assert cache.get_or_compile(path) is good

    def test_disabled_cache_always_compiles(self, tmpl):
        cache = TemplateCache(EngineConfig(cache_enabled=False))
        path = tmpl("x")

        assert cache.get_or_compile(path) is not cache.get_or_compile(path)
        snapshot = cache.snapshot()
        assert snapshot.enabled is False
        assert snapshot.entries == 0

    def test_env_disables_cache(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("VINGO_CACHE", "off")

        assert TemplateCache().snapshot().enabled is False

    def test_custom_encoding(self, tmp_path):
        path = tmp_path / "latin.vgo"
        path.write_bytes("café <{x}>".encode("latin-1"))

        cache = TemplateCache(EngineConfig(encoding="latin-1"))
        assert cache.render(path, {"x": "ok"}) == "café ok"

    def test_concurrent_renders(self, cache, tmpl):
        path = tmpl("<{for i in items}><{i}><{/for}>")
        context = {"items": list(range(5))}

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: cache.render(path, context), range(64)))

        assert set(results) == {"01234"}
        assert cache.snapshot().entries == 1

    def test_concurrent_distinct_files(self, cache, tmp_path):
        paths = [write(tmp_path / f"t{i}.vgo", f"file {i}") for i in range(10)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda p: cache.render(p), paths * 4))

        assert results == [f"file {i}" for i in range(10)] * 4
        assert cache.snapshot().entries == 10


class TestModuleLevelRender:

    def test_render_through_default_cache(self, tmpl):
        path = tmpl("<{if ok}>yes<{/if}>", name="module.vgo")

        assert vingo.render(path, {"ok": True}) == "yes"
        assert vingo.render(str(path), {"ok": False}) == ""

    def test_default_cache_is_shared(self):
        from vingo.cache import default_cache
        assert default_cache() is default_cache()

    def test_default_cache_ignores_working_directory_config(self, tmp_path, monkeypatch):
        """Кэш по умолчанию не читает vingo.yaml из текущего каталога"""
        import vingo.cache.template_cache as template_cache

        write(tmp_path / "vingo.yaml", "cache: [broken\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("VINGO_CACHE", raising=False)
        monkeypatch.setattr(template_cache, "_default_cache", None)

        path = write(tmp_path / "page.vgo", "Hi <{name}>")
        assert vingo.render(path, {"name": "Bob"}) == "Hi Bob"
        assert template_cache.default_cache().config.cache_enabled

    def test_default_cache_honours_env(self, monkeypatch):
        import vingo.cache.template_cache as template_cache

        monkeypatch.setenv("VINGO_CACHE", "off")
        monkeypatch.setattr(template_cache, "_default_cache", None)
        assert not template_cache.default_cache().config.cache_enabled
