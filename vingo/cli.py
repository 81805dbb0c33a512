from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .cache import TemplateCache
from .config import load_config, resolve_config
from .errors import VingoUserError
from .values import literal_from_string
from .version import tool_version

_yaml = YAML(typ="safe")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vingo",
        description="Text template engine with <{ }> tags",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="отладочный вывод в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Отрендерить файл шаблона в stdout")
    sp_render.add_argument("template", help="путь к файлу шаблона")
    sp_render.add_argument(
        "--data",
        metavar="FILE",
        help="YAML/JSON-файл с данными контекста (корень — мапа)",
    )
    sp_render.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="значение контекста по точечному пути, например user.name=Ann (можно указать несколько)",
    )
    sp_render.add_argument(
        "--config",
        metavar="FILE",
        help="файл конфигурации (по умолчанию ./vingo.yaml, если есть)",
    )

    # Регистрация внешних подкоманд
    from .scaffold import add_cli as _add_scaffold_cli
    _add_scaffold_cli(sub)

    return p


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("VINGO_DEBUG") else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root = logging.getLogger("vingo")
    root.handlers[:] = [handler]
    root.setLevel(level)


def _load_data(data_arg: Optional[str]) -> Dict[str, Any]:
    """Читает контекст из YAML/JSON-файла."""
    if not data_arg:
        return {}
    path = Path(data_arg)
    if not path.is_file():
        raise ValueError(f"Data file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, YAMLError) as e:
        raise ValueError(f"Failed to read data file {path}: {e}")
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Data file must contain a mapping at top level: {path}")
    return raw


def _apply_overrides(data: Dict[str, Any], overrides: List[str] | None) -> Dict[str, Any]:
    """
    Применяет --set key.path=value поверх данных.

    Значение разбирается как литерал шаблона (строка в кавычках, число,
    true/false), иначе остаётся строкой. Промежуточные мапы создаются
    по мере необходимости.
    """
    for spec in overrides or []:
        if "=" not in spec:
            raise ValueError(f"Invalid --set format '{spec}'. Expected 'key=value'")
        key, raw_value = spec.split("=", 1)
        segments = [s.strip() for s in key.split(".")]
        if not all(segments):
            raise ValueError(f"Invalid --set key '{key}'")

        node = data
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[segments[-1]] = literal_from_string(raw_value)
    return data


def _run_render(ns: argparse.Namespace) -> int:
    config = load_config(Path(ns.config)) if ns.config else resolve_config()
    context = _apply_overrides(_load_data(ns.data), ns.set)
    sys.stdout.write(TemplateCache(config).render(ns.template, context))
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(ns.verbose))

    try:
        # Унифицированный хук для внешних подкоманд: subparser.set_defaults(func=...)
        if hasattr(ns, "func") and callable(getattr(ns, "func")):
            rc = ns.func(ns)
            return int(rc) if isinstance(rc, int) else 0

        if ns.cmd == "render":
            return _run_render(ns)

    except VingoUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
