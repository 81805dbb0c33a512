from __future__ import annotations

from .template_cache import (
    CacheSnapshot,
    Template,
    TemplateCache,
    default_cache,
    render,
)

__all__ = ["CacheSnapshot", "Template", "TemplateCache", "default_cache", "render"]
