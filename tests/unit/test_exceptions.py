import pytest
from ldglob import (
    CombinationError,
    GlobTraversalError,
    LDGlobError,
    NotAcceptableError,
    UnsupportedMediaTypeError,
)


def test_traversal_error_is_oserror():
    err = GlobTraversalError("/a", 500)
    assert isinstance(err, OSError)
    assert isinstance(err, LDGlobError)
    assert err.path == "/a"
    assert err.status == 500
    assert "status 500" in str(err)


def test_combination_error_carries_url():
    err = CombinationError("https://pod.example/a", reason="unparsable body")
    assert isinstance(err, OSError)
    assert err.url == "https://pod.example/a"
    assert err.status is None
    assert "unparsable body" in str(err)


def test_value_errors():
    assert isinstance(NotAcceptableError("image/png"), ValueError)
    assert isinstance(UnsupportedMediaTypeError("image/png"), ValueError)


def test_catchable_as_base():
    with pytest.raises(LDGlobError):
        raise GlobTraversalError("/a")
