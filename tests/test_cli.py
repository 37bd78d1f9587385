import json
import shutil
from pathlib import Path

import pytest

from bevy_lint import cli

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "demo"


@pytest.fixture
def demo_crate(tmp_path):
    target = tmp_path / "demo"
    shutil.copytree(FIXTURE_DIR, target)
    return target


def test_cli_generates_json_report(demo_crate, tmp_path, capsys):
    output_path = tmp_path / "lint.json"

    exit_code = cli.main([str(demo_crate / "program.yaml"), "--out", str(output_path)])

    captured = capsys.readouterr()
    assert "Lint Summary" in captured.out
    assert "error: called `App::insert_resource(Events<T>)` instead of `App::add_event::<T>()`" in captured.out
    assert exit_code == 1
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert data["passed"] is False
    assert data["summary"] == {"forbid": 0, "deny": 1, "warn": 2}

    by_lint = {diagnostic["lint"]: diagnostic for diagnostic in data["diagnostics"]}
    assert list(by_lint) == [
        "bevy::zst_query",
        "bevy::main_return_without_appexit",
        "bevy::insert_event_resource",
    ]
    zst = by_lint["bevy::zst_query"]
    assert zst["level"] == "warn"
    assert zst["span"] == [131, 138]
    assert zst["help"] == "consider using a filter instead: `With<Marker>`"

    main_return = by_lint["bevy::main_return_without_appexit"]
    assert main_return["span"] == [162, 224]
    assert [(s["span"], s["replacement"]) for s in main_return["suggestions"]] == [
        ([155, 155], "-> AppExit"),
        ([224, 225], ""),
    ]

    [suggestion] = by_lint["bevy::insert_event_resource"]["suggestions"]
    assert suggestion == {
        "span": [173, 218],
        "replacement": "add_event::<MyEvent>()",
        "applicability": "MachineApplicable",
        "message": "inserting an `Events` resource does not fully setup that event",
    }


def test_cli_toggles_override_defaults(demo_crate, capsys):
    exit_code = cli.main([str(demo_crate / "program.yaml"), "-A", "insert_event_resource"])

    captured = capsys.readouterr()
    assert "Status    : PASS" in captured.out
    assert exit_code == 0


def test_cli_manifest_is_applied_after_flags(demo_crate, tmp_path, capsys):
    output_path = tmp_path / "lint.json"

    cli.main([str(demo_crate / "program.yaml"), "--allow", "zst_query", "--out", str(output_path)])

    capsys.readouterr()
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert "bevy::zst_query" in [diagnostic["lint"] for diagnostic in data["diagnostics"]]


def test_cli_explicit_manifest_path(demo_crate, tmp_path, capsys):
    manifest = tmp_path / "Other.toml"
    manifest.write_text("[package]\nname = \"demo\"\n")
    output_path = tmp_path / "lint.json"

    cli.main([str(demo_crate / "program.yaml"), "--manifest-path", str(manifest), "--out", str(output_path)])

    capsys.readouterr()
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert data["summary"]["warn"] == 1


def test_cli_fix_applies_machine_applicable_suggestions(demo_crate, capsys):
    exit_code = cli.main([str(demo_crate / "program.yaml"), "--fix"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "Applied 1 fix(es)" in captured.out
    fixed = (demo_crate / "src" / "main.rs").read_text(encoding="utf-8")
    assert "    App::new().add_event::<MyEvent>().run();\n" in fixed
    assert "fn main() {" in fixed


def test_cli_unknown_lint_is_an_error(demo_crate):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(demo_crate / "program.yaml"), "-D", "not_a_lint"])

    assert "unknown lint or lint group" in str(excinfo.value)


def test_cli_missing_program_is_an_error(tmp_path):
    with pytest.raises(SystemExit):
        cli.main([str(tmp_path / "missing.yaml")])


def test_cli_lists_lints_and_groups(capsys):
    exit_code = cli.main(["--list"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "bevy::insert_event_resource" in captured.out
    assert "bevy::restriction" in captured.out
    [zst_line] = [line for line in captured.out.splitlines() if line.startswith("bevy::zst_query ")]
    assert zst_line.split()[1] == "allow"
