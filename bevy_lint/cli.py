"""Command-line entry point for the Bevy linter."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Tuple

from .driver import Linter
from .errors import BevyLintError
from .host import ProgramHost
from .result import LintReport, apply_suggestions, format_summary_table, render_diagnostic
from .severity import Level
from .utils.program import Program, load_program

LEVEL_FLAGS = (
    ("-A", "--allow", Level.ALLOW),
    ("-W", "--warn", Level.WARN),
    ("-D", "--deny", Level.DENY),
    ("-F", "--forbid", Level.FORBID),
)


class _LevelAction(argparse.Action):
    """Collect ``--allow``/``--warn``/... flags into one list, keeping command-line order."""

    def __call__(self, parser, namespace, values, option_string=None):
        toggles = list(getattr(namespace, self.dest) or [])
        toggles.append((values, self.const))
        setattr(namespace, self.dest, toggles)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bevy-lint",
        description="Lint a type-checked Bevy program for discouraged API usage",
    )
    parser.add_argument(
        "program",
        nargs="?",
        help="Path to the typed program dump (YAML or JSON) written by the frontend.",
    )
    parser.add_argument(
        "--manifest-path",
        default=None,
        help="Cargo.toml to read [package.metadata.bevy_lint] from (default: nearest to the source file).",
    )
    for short, long, level in LEVEL_FLAGS:
        parser.add_argument(
            short,
            long,
            dest="toggles",
            action=_LevelAction,
            const=level,
            default=[],
            metavar="LINT",
            help=f"Set a lint or lint group to `{level.value}` (repeatable).",
        )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write the structured report (e.g., artifacts/lint.json).",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Apply machine-applicable suggestions to the source file.",
    )
    parser.add_argument(
        "--list",
        dest="list_lints",
        action="store_true",
        help="List the registered lints and groups, then exit.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def run_lint(program_path: str, toggles: List[Tuple[str, Level]], manifest_path: str | None = None) -> Tuple[Program, LintReport]:
    program = load_program(Path(program_path))
    linter = Linter()
    report = linter.lint(
        program,
        toggles=toggles,
        host=ProgramHost(program),
        manifest_path=Path(manifest_path) if manifest_path else None,
    )
    return program, report


def write_output(program: Program, report: LintReport, output_path: str | None) -> None:
    source_map = program.source_map() if program.source_text else None
    for diagnostic in report.diagnostics:
        print(render_diagnostic(diagnostic, source_map))
        print()
    print(format_summary_table(report))

    if output_path:
        payload = json.dumps(report.to_dict(), indent=2)
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding="utf-8")
        print(f"\nReport written to {output_path}")


def apply_fixes(program: Program, report: LintReport) -> int:
    source_path = program.source_path
    if source_path is None or not program.source_text:
        return 0
    fixed, applied = apply_suggestions(program.source_text, report.suggestions())
    if applied:
        source_path.write_text(fixed, encoding="utf-8")
        print(f"\nApplied {len(applied)} fix(es) to {source_path}")
    return len(applied)


def list_lints() -> None:
    store = Linter().store
    for name, (level, desc) in store.describe().items():
        print(f"{name:<40} {level.value:<7} {desc}")
    print()
    for group in store.groups:
        print(f"{group.name:<40} {', '.join(member.split('::', 1)[1] for member in group.members)}")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_lints:
        list_lints()
        return 0
    if not args.program:
        parser.error("the program dump path is required")

    try:
        program, report = run_lint(args.program, args.toggles, args.manifest_path)
    except BevyLintError as exc:
        raise SystemExit(f"bevy-lint: {exc}") from exc
    write_output(program, report, args.output_path)
    if args.fix:
        apply_fixes(program, report)
    return report.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
