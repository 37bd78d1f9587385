"""Core diagnostic data structures for the linter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .severity import Level
from .span import SourceMap, Span

LEVEL_ORDER: Sequence[Level] = (
    Level.FORBID,
    Level.DENY,
    Level.WARN,
)


class Applicability(str, Enum):
    """How confident a suggestion is, and whether it may be applied automatically."""

    MACHINE_APPLICABLE = "MachineApplicable"
    MAYBE_INCORRECT = "MaybeIncorrect"
    HAS_PLACEHOLDERS = "HasPlaceholders"
    UNSPECIFIED = "Unspecified"

    @property
    def confidence(self) -> int:
        ordering = {
            Applicability.MACHINE_APPLICABLE: 3,
            Applicability.MAYBE_INCORRECT: 2,
            Applicability.HAS_PLACEHOLDERS: 1,
            Applicability.UNSPECIFIED: 0,
        }
        return ordering[self]

    def downgrade(self, other: "Applicability") -> "Applicability":
        """Return whichever of ``self`` and ``other`` is less confident."""

        return self if self.confidence <= other.confidence else other


@dataclass(frozen=True)
class Suggestion:
    """A textual edit replacing ``span`` with ``replacement``."""

    span: Span
    replacement: str
    applicability: Applicability
    message: str = "try"

    def to_dict(self) -> Dict[str, object]:
        return {
            "span": self.span.to_list(),
            "replacement": self.replacement,
            "applicability": self.applicability.value,
            "message": self.message,
        }


@dataclass
class Diagnostic:
    """Capture a single finding reported by a lint."""

    lint: str
    level: Level
    span: Span
    message: str
    help: Optional[str] = None
    suggestions: List[Suggestion] = field(default_factory=list)

    def add_suggestion(
        self,
        span: Span,
        replacement: str,
        applicability: Applicability,
        message: str = "try",
    ) -> "Diagnostic":
        self.suggestions.append(Suggestion(span, replacement, applicability, message))
        return self

    def to_dict(self) -> Dict[str, object]:
        return {
            "lint": self.lint,
            "level": self.level.value,
            "span": self.span.to_list(),
            "message": self.message,
            "help": self.help,
            "suggestions": [suggestion.to_dict() for suggestion in self.suggestions],
        }


@dataclass
class Summary:
    """Aggregate diagnostic counts by level."""

    forbid: int = 0
    deny: int = 0
    warn: int = 0

    def increment(self, level: Level) -> None:
        setattr(self, level.value, getattr(self, level.value) + 1)

    def to_dict(self) -> Dict[str, int]:
        return {level.value: getattr(self, level.value) for level in LEVEL_ORDER}

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return level/count pairs ordered for reporting."""

        return [(level.value, getattr(self, level.value)) for level in LEVEL_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, level.value) for level in LEVEL_ORDER)


@dataclass
class LintReport:
    """Bundle the summary and diagnostics of one lint session."""

    summary: Summary = field(default_factory=Summary)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.summary.forbid == 0 and self.summary.deny == 0

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        if diagnostic.level is Level.ALLOW:
            raise ValueError(f"{diagnostic.lint} is allowed and cannot be reported")
        self.summary.increment(diagnostic.level)
        self.diagnostics.append(diagnostic)

    def for_lint(self, lint: str) -> List[Diagnostic]:
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.lint == lint]

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.summary.to_dict(),
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
            "passed": self.passed,
        }

    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def suggestions(self, minimum: Applicability = Applicability.MACHINE_APPLICABLE) -> List[Suggestion]:
        """Return every suggestion at least as confident as ``minimum``."""

        return [
            suggestion
            for diagnostic in self.diagnostics
            for suggestion in diagnostic.suggestions
            if suggestion.applicability.confidence >= minimum.confidence
        ]


def apply_suggestions(text: str, suggestions: Iterable[Suggestion]) -> Tuple[str, List[Suggestion]]:
    """Apply machine-applicable suggestions to ``text``.

    Suggestions below ``MachineApplicable`` are never applied. When two edits
    overlap, the one that appears first in source order wins and the other is
    skipped. Returns the new text and the suggestions that were applied.
    """

    data = text.encode("utf-8")
    candidates = sorted(
        (s for s in suggestions if s.applicability is Applicability.MACHINE_APPLICABLE),
        key=lambda s: (s.span.lo, s.span.hi),
    )
    accepted: List[Suggestion] = []
    for suggestion in candidates:
        if suggestion.span.hi > len(data):
            continue
        if any(suggestion.span.overlaps(previous.span) for previous in accepted):
            continue
        accepted.append(suggestion)

    for suggestion in reversed(accepted):
        data = data[: suggestion.span.lo] + suggestion.replacement.encode("utf-8") + data[suggestion.span.hi :]
    return data.decode("utf-8"), accepted


def render_diagnostic(diagnostic: Diagnostic, source_map: Optional[SourceMap] = None) -> str:
    """Render a diagnostic in a compiler-like, human-readable form."""

    lines = [f"{diagnostic.level.label}: {diagnostic.message}"]
    if source_map is not None and source_map.contains(diagnostic.span):
        line, col = source_map.line_col(diagnostic.span.lo)
        gutter = " " * len(str(line))
        lines.append(f"{gutter}--> {source_map.location(diagnostic.span)}")
        lines.append(f"{gutter} |")
        lines.append(f"{line} | {source_map.line_text(line)}")
        end_line, end_col = source_map.line_col(diagnostic.span.hi)
        width = end_col - col if end_line == line else len(source_map.line_text(line)) - col + 1
        lines.append(f"{gutter} | {' ' * (col - 1)}{'^' * max(width, 1)}")
    lines.append(f"  = note: `{diagnostic.lint}` is set to `{diagnostic.level.value}`")
    if diagnostic.help:
        lines.append(f"  = help: {diagnostic.help}")
    for suggestion in diagnostic.suggestions:
        lines.append(
            f"  = {suggestion.message}: `{suggestion.replacement}` ({suggestion.applicability.value})"
        )
    return "\n".join(lines)


def format_summary_table(report: LintReport) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Lint Summary")
    lines.append("=" * 40)
    header = f"{'Level':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for level, count in report.summary.as_rows():
        lines.append(f"{level:<10} | {count:>5}")
    lines.append("-" * len(header))
    status = "PASS" if report.passed else "FAIL"
    lines.append(f"Status    : {status}")
    lines.append(f"Findings  : {report.summary.total}")
    return "\n".join(lines)
