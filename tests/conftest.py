from pathlib import Path

import pytest

from vingo.cache import TemplateCache
from vingo.config import EngineConfig

from tests.infrastructure.file_utils import write


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # переменные окружения разработчика не должны влиять на тесты
    monkeypatch.delenv("VINGO_CACHE", raising=False)
    monkeypatch.delenv("VINGO_DEBUG", raising=False)


@pytest.fixture
def cache() -> TemplateCache:
    """Изолированный кэш шаблонов с настройками по умолчанию."""
    return TemplateCache(EngineConfig())


@pytest.fixture
def tmpl(tmp_path: Path):
    """Фабрика файлов шаблонов во временном каталоге."""
    def make(text: str, name: str = "page.vgo") -> Path:
        return write(tmp_path / name, text)
    return make
