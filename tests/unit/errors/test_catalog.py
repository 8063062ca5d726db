"""
Unit tests for the named HTTP error constructors.
"""

import pytest

from error_toolkit.errors import catalog
from error_toolkit.errors.exceptions import AppError


@pytest.mark.parametrize("name", sorted(catalog.ERROR_CATALOG))
def test_every_catalog_entry_has_a_factory(name):
    status_code, code, default_message = catalog.ERROR_CATALOG[name]
    factory = getattr(catalog, name)

    error = factory("custom message", {"k": "v"})

    assert isinstance(error, AppError)
    assert error.status_code == status_code
    assert error.code == code
    assert error.message == "custom message"
    assert error.context == {"k": "v"}
    assert factory.__name__ == name


def test_default_messages():
    assert catalog.not_found().message == "Not Found"
    assert catalog.im_a_teapot().message == "I'm a Teapot"
    assert catalog.too_many_requests().status_code == 429


@pytest.mark.parametrize("name", ["bad_request", "conflict", "validation_error"])
def test_message_required_factories(name):
    factory = getattr(catalog, name)

    with pytest.raises(TypeError):
        factory()


def test_validation_error_shares_422_with_unprocessable_entity():
    assert catalog.validation_error("bad").status_code == 422
    assert catalog.validation_error("bad").code == "VALIDATION_ERROR"
    assert catalog.unprocessable_entity().code == "UNPROCESSABLE_ENTITY"


def test_create_from_status_known():
    error = catalog.create_from_status(503)

    assert error.code == "SERVICE_UNAVAILABLE"
    assert error.message == "Service Unavailable"


def test_create_from_status_prefers_first_entry_for_shared_status():
    assert catalog.create_from_status(422).code == "UNPROCESSABLE_ENTITY"


def test_create_from_status_without_default_message():
    assert catalog.create_from_status(400).message == "Error 400"
    assert catalog.create_from_status(400, "Missing field").message == "Missing field"


def test_create_from_status_unknown():
    error = catalog.create_from_status(499, context={"client": "gone"})

    assert error.status_code == 499
    assert error.code is None
    assert error.message == "Error 499"
    assert error.context == {"client": "gone"}
