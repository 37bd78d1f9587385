from bevy_lint.driver import Linter
from bevy_lint.severity import Level
from bevy_lint.tree import Lit, PathExpr, parse_ty

from treebuilders import main_fn, make_program, method_call, path_ty, run_lints, semi, span_of

WORLD = "&mut bevy_ecs::world::World"
QUERY = "bevy_ecs::system::query::Query<&demo::Player>"
WARN_ALL = [("panicking_world_methods", Level.WARN), ("panicking_query_methods", Level.WARN)]


def world_resource_program(text):
    world = PathExpr(span=span_of(text, "world", 1), ty=parse_ty(WORLD), path="world")
    call = method_call(
        text,
        world,
        "resource",
        "&demo::Score",
        generics=[path_ty(text, "Score", "demo::Score")],
    )
    return make_program(text, [main_fn(text, stmts=[semi(text, call)], entrypoint=False, name="sys")]), call


def test_world_resource_suggests_get_resource():
    text = "fn sys(world: &mut World) {\n    world.resource::<Score>();\n}\n"
    program, call = world_resource_program(text)

    report = run_lints(program, toggles=WARN_ALL)

    [diagnostic] = report.diagnostics
    assert diagnostic.lint == "bevy::panicking_world_methods"
    assert diagnostic.span == call.span
    assert diagnostic.message == "called a `World` method that can panic when a non-panicking alternative exists"
    assert diagnostic.help == "use `world.get_resource::<Score>()`"


def test_world_methods_are_allowed_by_default():
    text = "fn sys(world: &mut World) {\n    world.resource::<Score>();\n}\n"
    program, _ = world_resource_program(text)

    assert run_lints(program).diagnostics == []


def test_help_without_source_names_the_alternative():
    text = "fn sys(world: &mut World) {\n    world.resource::<Score>();\n}\n"
    program, _ = world_resource_program(text)
    program.source_text = ""

    report = run_lints(program, toggles=WARN_ALL)

    assert report.diagnostics[0].help == "use `World::get_resource()` instead"


def test_query_many_keeps_call_arguments():
    text = "fn sys(query: Query<&Player>) {\n    query.many([a, b]);\n}\n"
    query = PathExpr(span=span_of(text, "query", 1), ty=parse_ty(QUERY), path="query")
    entities = Lit(span=span_of(text, "[a, b]"), ty=parse_ty("demo::Entities"), value="[a, b]")
    call = method_call(text, query, "many", "demo::Players", args=[entities], end="b])")
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)], entrypoint=False, name="sys")])

    report = run_lints(program, toggles=WARN_ALL)

    [diagnostic] = report.diagnostics
    assert diagnostic.lint == "bevy::panicking_query_methods"
    assert diagnostic.help == "use `query.get_many([a, b])`"


def test_methods_without_alternative_are_ignored():
    text = "fn sys(world: &mut World) {\n    world.spawn_empty();\n}\n"
    world = PathExpr(span=span_of(text, "world", 1), ty=parse_ty(WORLD), path="world")
    call = method_call(text, world, "spawn_empty", "demo::EntityWorldMut")
    program = make_program(text, [main_fn(text, stmts=[semi(text, call)], entrypoint=False, name="sys")])

    assert run_lints(program, toggles=WARN_ALL).diagnostics == []


def test_ignored_methods_from_manifest(tmp_path):
    manifest = tmp_path / "Cargo.toml"
    manifest.write_text(
        "[package]\nname = \"demo\"\n\n"
        "[package.metadata.bevy_lint]\n"
        "panicking_world_methods = { level = \"warn\", ignore = [\"resource\"] }\n"
    )
    text = "fn sys(world: &mut World) {\n    world.resource::<Score>();\n}\n"
    program, _ = world_resource_program(text)

    report = Linter().lint(program, manifest_path=manifest)

    assert report.diagnostics == []
