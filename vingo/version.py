from __future__ import annotations

from importlib import metadata

DISTRIBUTION = "vingo"


def tool_version() -> str:
    """Версия установленного дистрибутива; "0.0.0" при запуске из исходников."""
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["tool_version"]
