"""Tests for Outcome values and automatic error widening."""

import pytest

from borrowkit import (
    U16,
    BoxedError,
    CapabilityRegistry,
    ConversionError,
    Err,
    NoConversionError,
    Ok,
    Text,
    TryFromIntError,
    Utf8Error,
    propagates,
    try_convert,
)
from borrowkit.core.outcome import UnwrapError, widen


def test_ok_combinators():
    outcome = Ok(2)

    assert outcome.is_ok() and not outcome.is_err()
    assert outcome.unwrap() == 2
    assert outcome.unwrap_or(0) == 2
    assert outcome.map(lambda v: v * 10) == Ok(20)
    assert outcome.map_err(str) is outcome
    assert outcome.and_then(lambda v: Err("stop")) == Err("stop")


def test_err_combinators():
    failure = ConversionError("bad")
    outcome = Err(failure)

    assert outcome.is_err()
    assert outcome.unwrap_or(0) == 0
    assert outcome.unwrap_or_else(lambda e: str(e)) == "bad"
    assert outcome.map(lambda v: v * 10) is outcome
    assert outcome.map_err(lambda e: e.describe().upper()) == Err("BAD")
    with pytest.raises(ConversionError, match="bad"):
        outcome.unwrap()


def test_unwrap_non_exception_failure():
    with pytest.raises(UnwrapError, match="'marker'"):
        Err("marker").unwrap()


@propagates()
def parse_port(raw: int):
    port = try_convert(raw, U16).propagate()
    return Ok(port)


def test_propagate_passes_ok_values_through():
    assert parse_port(8080) == Ok(U16(8080))


def test_propagate_widens_failure_into_boxed_error():
    """CRITICAL: concrete failures reach the caller boxed, with the original attached."""
    outcome = parse_port(70_000)

    assert outcome.is_err()
    error = outcome.error
    assert isinstance(error, BoxedError)
    assert isinstance(error.source, TryFromIntError)
    assert error.__cause__ is error.source
    assert "out of range" in str(error)


def test_propagate_mixed_failure_types():
    @propagates()
    def load(raw: bytes, size: int):
        text = try_convert(raw, Text).propagate()
        width = try_convert(size, U16).propagate()
        return Ok((text, width))

    assert load(b"ok", 3) == Ok((Text("ok"), U16(3)))
    assert isinstance(load(b"\xff", 3).error.source, Utf8Error)
    assert isinstance(load(b"ok", -3).error.source, TryFromIntError)


def test_describable_non_exception_failure_is_boxed():
    class Overflowed:
        def describe(self) -> str:
            return "overflow occurred"

    @propagates()
    def step():
        Err(Overflowed()).propagate()
        return Ok(None)

    error = step().error
    assert isinstance(error, BoxedError)
    assert str(error) == "overflow occurred"
    assert error.__cause__ is None


def test_boxed_error_is_not_boxed_twice():
    boxed = BoxedError("already")
    assert widen(boxed, BoxedError) is boxed
    assert BoxedError.from_failure(boxed) is boxed


def test_widening_into_custom_error_type():
    class AppError(Exception):
        pass

    registry = CapabilityRegistry()
    registry.register_conversion(TryFromIntError, AppError, lambda e: AppError(e.describe()))

    @propagates(AppError, registry=registry)
    def narrow(value: int):
        return Ok(try_convert(value, U16).propagate())

    assert isinstance(narrow(-1).error, AppError)


def test_widening_without_conversion_raises():
    class Opaque:
        pass

    @propagates()
    def broken():
        Err(Opaque()).propagate()
        return Ok(None)

    with pytest.raises(NoConversionError):
        broken()
