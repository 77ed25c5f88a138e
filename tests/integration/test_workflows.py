"""End-to-end journeys combining cells, conversions and keyed lookup."""

from borrowkit import (
    I32,
    U16,
    BoxedError,
    Cow,
    EquivalentMap,
    Err,
    Ok,
    Text,
    TextSpan,
    TryFromIntError,
    Utf8Error,
    accepts_ref,
    propagates,
    try_convert,
)


def normalize(raw: str) -> Cow:
    """Strip trailing blanks, copying only when something changes."""
    cell = Cow.borrowed(raw)
    stripped = raw.rstrip()
    if stripped != raw:
        cell.write().truncate(len(stripped.encode("utf-8")))
    return cell


def test_normalize_then_index():
    """Clean inputs stay borrowed; dirty ones are owned; the map sees them all by content."""
    cells = [normalize(word) for word in ["alpha", "beta  ", "gamma", "alpha "]]

    assert [cell.is_borrowed for cell in cells] == [True, False, True, False]
    assert [cell.read() for cell in cells] == ["alpha", "beta", "gamma", "alpha"]

    counts = EquivalentMap(Text)
    for cell in cells:
        word = cell.read()
        if word in counts:
            counts[word] += 1
        else:
            counts.insert(cell.into_owned(), 1)

    assert len(counts) == 3
    assert counts["alpha"] == 2
    assert all(type(key) is Text for key in counts)


def test_tokens_are_looked_up_without_owning_them():
    keywords = EquivalentMap(Text, {Text("let"): "binding", Text("fn"): "function"})
    line = TextSpan.of("let x = fn y")

    kinds = []
    offset = 0
    for token in str(line).split(" "):
        span = line[offset : offset + len(token)]
        kinds.append(keywords.get(span, "name"))
        offset += len(token) + 1

    assert kinds == ["binding", "name", "name", "function", "name"]


@propagates()
def parse_endpoint(host: bytes, port: int, weight: int):
    name = try_convert(host, Text).propagate()
    checked_port = try_convert(port, U16).propagate()
    checked_weight = try_convert(weight, I32).propagate()
    return Ok((name, checked_port, checked_weight))


def test_parse_endpoints_with_uniform_errors():
    good = parse_endpoint(b"example", 443, 10)
    assert good == Ok((Text("example"), U16(443), I32(10)))

    failures = [
        parse_endpoint(b"\xc3", 443, 10),
        parse_endpoint(b"example", 70_000, 10),
        parse_endpoint(b"example", 443, 2_000_000_000_000),
    ]
    assert all(isinstance(outcome, Err) for outcome in failures)
    assert all(isinstance(outcome.error, BoxedError) for outcome in failures)
    assert [type(outcome.error.source) for outcome in failures] == [
        Utf8Error,
        TryFromIntError,
        TryFromIntError,
    ]


def test_views_flow_into_str_functions():
    @accepts_ref(text=str)
    def word_count(text: str) -> int:
        return len(text.split())

    owned = Text("one two three")
    cell = Cow.owned(owned)

    assert word_count(owned) == 3
    assert word_count(owned.as_span()[0:7]) == 2
    assert word_count(cell.read()) == 3
    assert cell.is_owned
