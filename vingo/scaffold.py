"""
Подкоманда `vingo init`: настройки редактора для файлов шаблонов.

Создаёт .vscode/settings.json, в котором *.vgo и *.vingo
подсвечиваются как HTML.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Dict

TEMPLATE_EXTENSIONS = ("*.vgo", "*.vingo")

SETTINGS_REL = ".vscode/settings.json"


def editor_settings() -> Dict:
    return {"files.associations": {ext: "html" for ext in TEMPLATE_EXTENSIONS}}


def init_editor_settings(*, root: Path, force: bool = False) -> Dict:
    """
    Пишет <root>/.vscode/settings.json.

    Существующий файл перезаписывается только при force=True.
    Возвращает JSON-совместимый словарь с полями: ok, path, created, message.
    """
    target = (root / SETTINGS_REL).resolve()

    if target.exists() and not force:
        return {
            "ok": False,
            "path": str(target),
            "created": False,
            "message": "Use --force to overwrite existing files.",
        }

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(editor_settings(), indent=4) + "\n", encoding="utf-8")
    return {"ok": True, "path": str(target), "created": True}


# ---------------- CLI glue ---------------- #

def add_cli(subparsers) -> None:
    """
    Регистрирует подкоманду 'init' и привязывает обработчик через set_defaults(func=...).
    """
    sp = subparsers.add_parser(
        "init",
        help="Создать .vscode/settings.json с подсветкой *.vgo/*.vingo",
    )
    sp.add_argument("--force", action="store_true", help="перезаписать существующий файл")
    sp.set_defaults(func=_run_cli, cmd="init")


def _run_cli(ns) -> int:
    """Обработчик подкоманды `vingo init`."""
    from .jsonic import dumps as jdumps
    result = init_editor_settings(root=Path.cwd(), force=bool(getattr(ns, "force", False)))
    sys.stdout.write(jdumps(result))
    return 0 if result["ok"] else 1


__all__ = ["init_editor_settings", "editor_settings", "add_cli"]
