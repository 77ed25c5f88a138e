"""Tests for the clone-on-write cell."""

from dataclasses import dataclass, field

import pytest
from hypothesis import given
from hypothesis import strategies as st

from borrowkit import (
    CapabilityRegistry,
    Cow,
    CowState,
    MovedValueError,
    Text,
    TextSpan,
    convert,
    drop,
    duplicate,
)

# Lone surrogates have no UTF-8 encoding.
_encodable = st.characters(exclude_categories=("Cs",))


@dataclass
class Counted:
    """Value that counts how often it was duplicated."""

    items: list[int] = field(default_factory=list)
    copies: list[int] = field(default_factory=list)

    def __duplicate__(self) -> "Counted":
        self.copies.append(1)
        return Counted(list(self.items))


def test_abc_scenario_duplicates_exactly_once(counting_registry, promotions):
    """CRITICAL: read twice without copying, then first write copies once.

    Why: duplication must happen at most once per cell and only on mutation.
    """
    cell = Cow.borrowed("abc", registry=counting_registry)

    assert cell.read() == "abc"
    assert cell.read() == "abc"
    assert promotions == []
    assert cell.state is CowState.BORROWED

    cell.write().push_str("d")
    assert cell.read() == "abcd"
    assert cell.state is CowState.OWNED

    cell.write().push_str("e")
    assert cell.read() == "abcde"
    assert promotions == ["abc"]


def test_borrowed_read_returns_the_reference_itself():
    original = Counted([1, 2])
    cell = Cow.borrowed(original)

    assert cell.read() is original
    assert original.copies == []


def test_write_does_not_touch_the_borrowed_original():
    original = Counted([1, 2])
    cell = Cow.borrowed(original)

    cell.write().items.append(3)

    assert original.items == [1, 2]
    assert cell.read().items == [1, 2, 3]
    assert len(original.copies) == 1


def test_owned_cell_never_duplicates():
    value = Counted([1])
    cell = Cow.owned(value)

    assert cell.write() is value
    assert cell.write() is value
    assert cell.into_owned() is value
    assert value.copies == []


def test_into_owned_from_borrowed_duplicates(counting_registry, promotions):
    cell = Cow.borrowed("xyz", registry=counting_registry)

    owned = cell.into_owned()

    assert owned == Text("xyz")
    assert promotions == ["xyz"]


def test_into_owned_consumes_the_cell():
    cell = Cow.owned(Text("gone"))
    cell.into_owned()

    with pytest.raises(MovedValueError):
        cell.read()
    with pytest.raises(MovedValueError):
        cell.write()
    assert repr(cell) == "Cow(<moved>)"


def test_drop_releases_and_consumes():
    cell = Cow.owned([1, 2, 3])
    drop(cell)

    with pytest.raises(MovedValueError):
        cell.is_owned


def test_owned_text_reads_through_default_view():
    cell = Cow.owned(Text("hi"))

    assert cell.read() == "hi"
    assert isinstance(cell.read(), str)
    assert cell.view_type is str
    assert cell.owned_type is Text


def test_owned_with_explicit_view_type():
    cell = Cow.owned(Text("hi"), view_type=TextSpan)

    assert isinstance(cell.read(), TextSpan)
    assert cell.read() == Text("hi")


def test_from_picks_state_by_declared_views():
    """Construction helper: views borrow, owned values are taken as owned."""
    assert Cow.from_("literal").is_borrowed
    assert Cow.from_(TextSpan.of("span")).is_borrowed
    assert Cow.from_(Text("computed")).is_owned
    assert Cow.from_([1, 2]).is_owned


def test_from_returns_existing_cell_unchanged():
    cell = Cow.borrowed("x")
    assert Cow.from_(cell) is cell


def test_convert_into_cow_uses_blanket_conversion():
    borrowed = convert("static", Cow)
    owned = convert(Text("dynamic"), Cow)

    assert borrowed.is_borrowed
    assert owned.is_owned
    assert borrowed.read() == "static"
    assert owned.read() == "dynamic"


def test_same_return_type_for_constant_and_computed():
    """A function can return either a borrowed constant or a computed value."""

    def label(count: int) -> Cow:
        if count == 0:
            return Cow.from_("none")
        return Cow.from_(Text(f"{count} items"))

    assert label(0) == "none"
    assert label(0).is_borrowed
    assert label(3) == "3 items"
    assert label(3).is_owned


def test_reflexive_cell_over_list_deep_copies():
    shared = [[1], [2]]
    cell = Cow.borrowed(shared)

    cell.write()[0].append(9)

    assert shared == [[1], [2]]
    assert cell.read() == [[1, 9], [2]]


def test_explicit_owned_type_must_be_declared(registry):
    with pytest.raises(TypeError, match="no owning equivalence"):
        Cow.borrowed("abc", owned_type=bytes, registry=registry)


def test_duplicate_of_borrowed_cell_shares_reference():
    original = Counted([1])
    cell = Cow.borrowed(original)

    clone = duplicate(cell)

    assert clone.is_borrowed
    assert clone.read() is original
    assert original.copies == []


def test_duplicate_of_owned_cell_copies_value():
    cell = Cow.owned(Text("a"))

    clone = duplicate(cell)
    clone.write().push_str("b")

    assert cell.read() == "a"
    assert clone.read() == "ab"


def test_equality_follows_read():
    borrowed = Cow.borrowed("same")
    owned = Cow.owned(Text("same"))

    assert borrowed == owned
    assert borrowed == "same"


def test_cells_are_unhashable():
    """A cell changes value on write(), so it cannot serve as a dict or set key."""
    cell = Cow.borrowed("same")

    with pytest.raises(TypeError, match="unhashable"):
        hash(cell)
    with pytest.raises(TypeError):
        {cell}


def test_repr_shows_state():
    assert repr(Cow.borrowed("x")) == "Cow.borrowed('x')"
    assert repr(Cow.owned(Text("x"))) == "Cow.owned(Text('x'))"


@given(st.text(alphabet=_encodable), st.integers(min_value=0, max_value=5))
def test_reads_never_duplicate(value, reads):
    """Property: any number of reads on a borrowed cell makes no copies."""
    promotions: list[str] = []
    registry = CapabilityRegistry()

    def to_owned(view: str) -> Text:
        promotions.append(view)
        return Text(view)

    registry.register_equivalence(Text, str, project=Text.as_str, to_owned=to_owned)
    cell = Cow.borrowed(value, registry=registry)

    for _ in range(reads):
        assert cell.read() == value

    assert promotions == []
    assert cell.is_borrowed


@given(
    st.text(alphabet=_encodable),
    st.lists(st.text(alphabet=_encodable, max_size=4), min_size=1, max_size=6),
)
def test_writes_duplicate_exactly_once(value, suffixes):
    """Property: one duplication no matter how many writes follow."""
    promotions: list[str] = []
    registry = CapabilityRegistry()

    def to_owned(view: str) -> Text:
        promotions.append(view)
        return Text(view)

    registry.register_equivalence(Text, str, project=Text.as_str, to_owned=to_owned)
    cell = Cow.borrowed(value, registry=registry)

    for suffix in suffixes:
        cell.write().push_str(suffix)

    assert len(promotions) == 1
    assert cell.read() == value + "".join(suffixes)
