from pathlib import Path

from tests.infrastructure.cli_utils import jload, run_cli
from tests.infrastructure.file_utils import write


def test_cli_render_with_data_file(tmp_path: Path):
    write(tmp_path / "page.vgo", "<{for u in users}><{u.name}>(<{u.age}>) <{/for}>")
    write(tmp_path / "data.yaml", "users:\n  - name: Ann\n    age: 30\n  - name: Bob\n    age: 25\n")

    cp = run_cli(tmp_path, "render", "page.vgo", "--data", "data.yaml")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "Ann(30) Bob(25) "


def test_cli_render_json_data(tmp_path: Path):
    write(tmp_path / "page.vgo", "<{if ok}><{title}><{/if}>")
    write(tmp_path / "data.json", '{"ok": true, "title": "Report"}')

    cp = run_cli(tmp_path, "render", "page.vgo", "--data", "data.json")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "Report"


def test_cli_render_set_overrides(tmp_path: Path):
    write(tmp_path / "page.vgo", "<{user.name}>:<{user.age}>:<{if user.admin}>A<{/if}>")
    write(tmp_path / "data.yaml", "user:\n  name: Ann\n  age: 1\n")

    cp = run_cli(
        tmp_path, "render", "page.vgo", "--data", "data.yaml",
        "--set", "user.age=42", "--set", "user.admin=true",
    )
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "Ann:42:A"


def test_cli_render_custom_markers(tmp_path: Path):
    write(tmp_path / "page.vgo", "Hi [[ who ]]")
    write(tmp_path / "markers.yaml", 'open_marker: "[["\nclose_marker: "]]"\n')

    cp = run_cli(tmp_path, "render", "page.vgo", "--config", "markers.yaml", "--set", "who=you")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "Hi you"


def test_cli_render_picks_up_vingo_yaml(tmp_path: Path):
    write(tmp_path / "page.vgo", "{{ x }}")
    write(tmp_path / "vingo.yaml", 'open_marker: "{{"\nclose_marker: "}}"\n')

    cp = run_cli(tmp_path, "render", "page.vgo", "--set", "x=1")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "1"


def test_cli_missing_template(tmp_path: Path):
    cp = run_cli(tmp_path, "render", "absent.vgo")
    assert cp.returncode == 2
    assert "Cannot load template" in cp.stderr
    assert "Traceback" not in cp.stderr


def test_cli_parse_error(tmp_path: Path):
    write(tmp_path / "page.vgo", "<{if x}>never closed")

    cp = run_cli(tmp_path, "render", "page.vgo")
    assert cp.returncode == 2
    assert "Unclosed if" in cp.stderr


def test_cli_bad_set(tmp_path: Path):
    write(tmp_path / "page.vgo", "x")

    cp = run_cli(tmp_path, "render", "page.vgo", "--set", "novalue")
    assert cp.returncode == 2
    assert "Expected 'key=value'" in cp.stderr


def test_cli_data_not_mapping(tmp_path: Path):
    write(tmp_path / "page.vgo", "x")
    write(tmp_path / "data.yaml", "- 1\n")

    cp = run_cli(tmp_path, "render", "page.vgo", "--data", "data.yaml")
    assert cp.returncode == 2
    assert "mapping" in cp.stderr


def test_cli_verbose_logs_to_stderr(tmp_path: Path):
    write(tmp_path / "page.vgo", "ok")

    cp = run_cli(tmp_path, "--verbose", "render", "page.vgo")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "ok"
    assert "[DEBUG] Compiling template" in cp.stderr


def test_cli_init_creates_settings(tmp_path: Path):
    cp = run_cli(tmp_path, "init")
    assert cp.returncode == 0, cp.stderr
    data = jload(cp.stdout)
    assert data["ok"] is True

    settings = jload((tmp_path / ".vscode" / "settings.json").read_text(encoding="utf-8"))
    assert settings == {"files.associations": {"*.vgo": "html", "*.vingo": "html"}}


def test_cli_init_refuses_overwrite(tmp_path: Path):
    write(tmp_path / ".vscode" / "settings.json", "{}")

    cp = run_cli(tmp_path, "init")
    assert cp.returncode == 1
    assert jload(cp.stdout)["ok"] is False
    assert (tmp_path / ".vscode" / "settings.json").read_text(encoding="utf-8") == "{}"

    cp = run_cli(tmp_path, "init", "--force")
    assert cp.returncode == 0, cp.stderr
    assert jload(cp.stdout)["created"] is True


def test_cli_version(tmp_path: Path):
    cp = run_cli(tmp_path, "--version")
    assert cp.returncode == 0
    assert cp.stdout.startswith("vingo ")
