"""Tests for call-site reference widening."""

from typing import TypeVar

import pytest

from borrowkit import CoercionError, Text, TextSpan, accepts_ref
from borrowkit.config import get_settings
from borrowkit.core.coercion import CoercionPlan, coerce, resolve_plan


class Path:
    def __init__(self, raw: str) -> None:
        self.raw = raw


class OsStr:
    def __init__(self, raw: str) -> None:
        self.raw = raw


class Bytesish:
    def __init__(self, raw: str) -> None:
        self.raw = raw


@pytest.fixture
def chain(registry):
    """Path -> OsStr -> Bytesish, one hop each."""
    registry.register_borrow(Path, OsStr, lambda p: OsStr(p.raw))
    registry.register_borrow(OsStr, Bytesish, lambda o: Bytesish(o.raw))
    return registry


def test_direct_borrow_resolves_in_one_hop(chain):
    plan = resolve_plan(Path, OsStr, chain)
    assert plan.depth == 1
    assert plan.describe() == "Path -> OsStr"


def test_one_level_of_chaining(chain):
    plan = resolve_plan(Path, Bytesish, chain)

    assert plan.depth == 2
    assert plan.apply(Path("/tmp")).raw == "/tmp"


def test_depth_limit_is_enforced(chain):
    with pytest.raises(CoercionError, match="within 1 borrow hop"):
        resolve_plan(Path, Bytesish, chain, max_depth=1)


def test_depth_limit_comes_from_settings(chain, monkeypatch, fresh_settings):
    monkeypatch.setenv("BORROWKIT_MAX_COERCION_DEPTH", "1")

    with pytest.raises(CoercionError):
        resolve_plan(Path, Bytesish, chain)


def test_instances_of_target_need_no_steps(chain):
    plan = resolve_plan(OsStr, OsStr, chain)
    assert plan == CoercionPlan(OsStr, OsStr)


def test_plans_are_cached_until_new_borrow(chain):
    first = resolve_plan(Path, OsStr, chain)
    assert resolve_plan(Path, OsStr, chain) is first

    chain.register_borrow(Bytesish, Path, lambda b: Path(b.raw))
    assert not chain.plan_cache


def test_cached_plan_does_not_bypass_a_lower_limit(chain):
    """CRITICAL: a plan found under a generous hop limit is not reused under a tighter one."""
    assert resolve_plan(Path, Bytesish, chain, max_depth=2).depth == 2

    with pytest.raises(CoercionError, match="within 1 borrow hop"):
        resolve_plan(Path, Bytesish, chain, max_depth=1)


def test_lowered_setting_applies_after_reload(chain, monkeypatch, fresh_settings):
    resolve_plan(Path, Bytesish, chain)

    monkeypatch.setenv("BORROWKIT_MAX_COERCION_DEPTH", "1")
    get_settings.cache_clear()

    with pytest.raises(CoercionError):
        resolve_plan(Path, Bytesish, chain)


def test_ambiguous_shortest_paths_are_rejected(registry):
    class Left:
        pass

    class Right:
        pass

    registry.register_borrow(Path, Left, lambda p: Left())
    registry.register_borrow(Path, Right, lambda p: Right())
    registry.register_borrow(Left, OsStr, lambda v: OsStr("left"))
    registry.register_borrow(Right, OsStr, lambda v: OsStr("right"))

    with pytest.raises(CoercionError, match="Ambiguous"):
        resolve_plan(Path, OsStr, registry)


def test_accepts_ref_rewrites_named_parameters(chain):
    @accepts_ref(registry=chain, target=Bytesish)
    def consume(target: Bytesish, label: str = "") -> str:
        assert isinstance(target, Bytesish)
        return label + target.raw

    assert consume(Path("/a")) == "/a"
    assert consume(OsStr("/b"), label="x") == "x/b"
    assert consume(target=Bytesish("/c")) == "/c"


def test_accepts_ref_with_global_text_borrows():
    @accepts_ref(text=str)
    def shout(text: str) -> str:
        return text.upper()

    assert shout("hi") == "HI"
    assert shout(Text("hi")) == "HI"
    assert shout(TextSpan.of("hi")) == "HI"


def test_generic_target_is_rejected_before_running():
    """CRITICAL: widening never fires to satisfy a generic constraint.

    Why: resolving a TypeVar by searching borrows would be ambiguous; it must
    fail when the function is defined, not when it is called.
    """
    T = TypeVar("T")

    with pytest.raises(CoercionError, match="generic"):

        @accepts_ref(value=T)
        def generic(value):
            return value

    with pytest.raises(CoercionError, match="generic"):
        coerce(Text("x"), T)


def test_non_class_target_is_rejected():
    with pytest.raises(CoercionError, match="not a class"):
        accepts_ref(value="str")


def test_unknown_parameter_is_rejected():
    with pytest.raises(CoercionError, match="no parameter"):

        @accepts_ref(missing=str)
        def fn(value):
            return value


def test_unresolvable_argument_fails_at_call(chain):
    @accepts_ref(registry=chain, target=OsStr)
    def consume(target):
        return target

    with pytest.raises(CoercionError, match="Cannot coerce Bytesish to OsStr"):
        consume(Bytesish("x"))
