from bevy_lint.result import Applicability, apply_suggestions
from bevy_lint.severity import Level
from bevy_lint.span import Span
from bevy_lint.tree import PathExpr, TupleTy, parse_ty

from treebuilders import APP, app_new, main_fn, make_program, method_call, path_ty, run_lints, semi, span_of

LINT = "bevy::main_return_without_appexit"
APP_EXIT = "bevy_app::app::AppExit"


def test_app_run_in_main_without_return_type():
    text = "fn main() {\n    App::new().run();\n}\n"
    call = method_call(text, app_new(text), "run", APP_EXIT)
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)])])

    report = run_lints(program)

    [diagnostic] = report.diagnostics
    assert diagnostic.lint == LINT
    assert diagnostic.level is Level.WARN
    assert diagnostic.span == span_of(text, "App::new().run()")
    assert diagnostic.message == "an entrypoint that calls `App::run()` does not return `AppExit`"
    return_type, remove_semi = diagnostic.suggestions
    assert return_type.span == Span(9, 9)
    assert return_type.replacement == "-> AppExit"
    assert return_type.applicability is Applicability.MAYBE_INCORRECT
    assert remove_semi.span == span_of(text, ";")
    assert remove_semi.replacement == ""
    assert report.passed
    assert report.exit_code() == 0


def test_suggestions_are_not_applied_automatically():
    text = "fn main() {\n    App::new().run();\n}\n"
    call = method_call(text, app_new(text), "run", APP_EXIT)
    report = run_lints(make_program(text, [main_fn(text, stmts=[semi(text, call)])]))

    fixed, applied = apply_suggestions(text, report.suggestions(Applicability.MAYBE_INCORRECT))

    assert applied == []
    assert fixed == text


def test_explicit_unit_return_type_is_linted():
    text = "fn main() -> () {\n    App::new().run();\n}\n"
    call = method_call(text, app_new(text), "run", APP_EXIT)
    # The first `()` belongs to `main()`.
    output = TupleTy(span=span_of(text, "()", 1), res=parse_ty("()"))
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)], output=output)])

    report = run_lints(program)

    [diagnostic] = report.for_lint(LINT)
    return_type = diagnostic.suggestions[0]
    assert return_type.span == Span(13, 15)
    assert return_type.replacement == "AppExit"
    edited = text[: return_type.span.lo] + return_type.replacement + text[return_type.span.hi :]
    assert edited.startswith("fn main() -> AppExit {\n")


def test_unit_alias_return_type_is_replaced():
    text = "fn main() -> Unit {\n    App::new().run();\n}\n"
    call = method_call(text, app_new(text), "run", APP_EXIT)
    output = path_ty(text, "Unit", "()")
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)], output=output)])

    report = run_lints(program)

    [diagnostic] = report.for_lint(LINT)
    assert diagnostic.suggestions[0].span == span_of(text, "Unit")
    assert diagnostic.suggestions[0].replacement == "AppExit"


def test_non_unit_return_type_is_left_alone():
    text = "fn main() -> Result<(), String> {\n    App::new().run();\n    Ok(())\n}\n"
    call = method_call(text, app_new(text), "run", APP_EXIT)
    output = path_ty(text, "Result<(), String>", "core::result::Result<(), alloc::string::String>")
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)], output=output)])

    report = run_lints(program)

    assert report.for_lint(LINT) == []


def test_only_the_entrypoint_is_checked():
    text = "fn start() {\n    App::new().run();\n}\n"
    call = method_call(text, app_new(text), "run", APP_EXIT)
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)], entrypoint=False, name="start")])

    report = run_lints(program)

    assert report.diagnostics == []


def test_each_run_call_is_reported():
    text = "fn main() {\n    App::new().run();\n    App::new().run();\n}\n"
    first = method_call(text, app_new(text), "run", APP_EXIT)
    second = method_call(text, app_new(text, occurrence=1), "run", APP_EXIT)
    program = make_program(text, [main_fn(text, stmts=[semi(text, first), semi(text, second)])])

    report = run_lints(program)

    diagnostics = report.for_lint(LINT)
    assert [d.span for d in diagnostics] == [first.span, second.span]
    # Only the final statement can become the returned value.
    assert len(diagnostics[0].suggestions) == 1
    assert len(diagnostics[1].suggestions) == 2


def test_run_on_other_types_is_ignored():
    text = "fn main() {\n    runner.run();\n}\n"
    runner = PathExpr(span=span_of(text, "runner"), ty=parse_ty("demo::Runner"), path="runner")
    call = method_call(text, runner, "run", "()")
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)])])

    assert run_lints(program).diagnostics == []


def test_run_through_reference_is_found():
    text = "fn main() {\n    app.run();\n}\n"
    app = PathExpr(span=span_of(text, "app"), ty=parse_ty(f"&mut {APP}"), path="app")
    call = method_call(text, app, "run", APP_EXIT)
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)])])

    assert len(run_lints(program).for_lint(LINT)) == 1
