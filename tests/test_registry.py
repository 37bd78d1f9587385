import pytest

from bevy_lint.driver import Callbacks, Linter, install, register_bevy_lints
from bevy_lint.errors import RegistrationError, UnknownLintError
from bevy_lint.groups import ALL, GROUPS, register_groups
from bevy_lint.registry import Lint, LintStore, qualify
from bevy_lint.severity import Level

ALPHA = Lint("alpha", Level.WARN, "first lint", groups=("style",))
BETA = Lint("beta", Level.ALLOW, "second lint", groups=("restriction",))
GAMMA = Lint("gamma", Level.FORBID, "third lint", groups=("restriction",))


def make_store(*lints):
    store = LintStore()
    store.register_lints(lints or (ALPHA, BETA, GAMMA))
    register_groups(store)
    return store


def test_lint_names_are_qualified():
    assert ALPHA.name == "bevy::alpha"
    assert ALPHA.short_name == "alpha"
    assert ALPHA.groups == ("bevy::style",)
    assert qualify("zst-query") == "bevy::zst_query"
    assert qualify("clippy::pedantic") == "clippy::pedantic"


def test_duplicate_lint_is_rejected():
    store = LintStore()
    store.register_lint(ALPHA)

    with pytest.raises(RegistrationError):
        store.register_lint(Lint("alpha", Level.DENY, "again"))


def test_group_names_cannot_collide():
    store = make_store()

    with pytest.raises(RegistrationError):
        store.register_group("style", [])
    with pytest.raises(RegistrationError):
        store.register_group("alpha", [])
    with pytest.raises(RegistrationError):
        store.register_group("custom", ["missing"])


def test_unknown_declared_group_is_rejected():
    store = LintStore()
    store.register_lint(Lint("odd", Level.WARN, "odd lint", groups=("unheard_of",)))

    with pytest.raises(RegistrationError):
        register_groups(store)


def test_groups_collect_their_members():
    store = make_store()
    groups = {group.name: group.members for group in store.groups}

    assert set(GROUPS) | {ALL} == set(groups)
    assert groups["bevy::restriction"] == ("bevy::beta", "bevy::gamma")
    assert groups["bevy::style"] == ("bevy::alpha",)
    assert groups["bevy::nursery"] == ()
    assert groups[ALL] == ("bevy::alpha", "bevy::beta", "bevy::gamma")


def test_expand_last_toggle_wins():
    store = make_store()

    expanded = store.expand([("restriction", Level.DENY), ("beta", Level.WARN)])

    assert expanded == [("bevy::beta", Level.WARN), ("bevy::gamma", Level.DENY)]


def test_expand_rejects_unknown_names():
    store = make_store()

    with pytest.raises(UnknownLintError) as excinfo:
        store.expand([("delta", Level.WARN)])
    assert "bevy::delta" in str(excinfo.value)


def test_resolve_levels_applies_lists_in_order():
    store = make_store()

    levels = store.resolve_levels([("alpha", Level.DENY)], [("alpha", Level.ALLOW), ("beta", Level.WARN)])

    assert levels["bevy::alpha"] is Level.ALLOW
    assert levels["bevy::beta"] is Level.WARN


def test_forbid_cannot_be_lowered():
    store = make_store()

    levels = store.resolve_levels([("beta", Level.FORBID)], [("restriction", Level.ALLOW)])

    assert levels["bevy::beta"] is Level.FORBID
    assert levels["bevy::gamma"] is Level.FORBID


def test_passes_are_created_in_registration_order():
    store = LintStore()
    created = []
    store.register_pass(lambda: created.append("first") or "first")
    store.register_pass(lambda: created.append("second") or "second")

    assert store.create_passes() == ["first", "second"]
    assert created == ["first", "second"]


def test_callbacks_chain_instead_of_replacing():
    order = []

    def extra(store):
        order.append("extra")
        store.register_lint(Lint("extra", Level.WARN, "from an extension"))

    callbacks = Callbacks()
    callbacks.install(extra)
    install(callbacks)

    linter = Linter(callbacks)

    assert callbacks.hooks == (extra, register_bevy_lints)
    assert order == ["extra"]
    assert linter.store.get_lint("extra").desc == "from an extension"
    assert linter.store.get_lint("zst_query").default_level is Level.ALLOW
    # `bevy::all` is registered after the extension, so it picks the lint up.
    assert "bevy::extra" in {group.name: group.members for group in linter.store.groups}[ALL]


def test_installing_a_hook_twice_fails():
    callbacks = install(Callbacks())

    with pytest.raises(RegistrationError):
        install(callbacks)


def test_builtin_catalog():
    linter = Linter()
    described = linter.store.describe()

    assert described["bevy::insert_event_resource"][0] is Level.DENY
    assert described["bevy::main_return_without_appexit"][0] is Level.WARN
    assert described["bevy::zst_query"][0] is Level.ALLOW
    assert len(linter.store.create_passes()) == 4
