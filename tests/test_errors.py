import pytest

from gethacked.errors import (
    BadRequestError,
    NotFoundError,
    PortalError,
    UnauthorizedError,
)


def test_bad_request_keeps_message_and_status():
    err = BadRequestError("Invalid action")
    assert str(err) == "Invalid action"
    assert err.message == "Invalid action"
    assert err.status == 400


def test_not_found_default_message():
    err = NotFoundError()
    assert err.message == "Not Found"
    assert err.status == 404


def test_unauthorized_default_message():
    err = UnauthorizedError()
    assert str(err) == "Unauthorized"
    assert err.status == 401


@pytest.mark.parametrize("cls", [NotFoundError, BadRequestError, UnauthorizedError])
def test_all_errors_caught_as_portal_error(cls):
    with pytest.raises(PortalError) as info:
        raise cls("boom")
    assert info.value.message == "boom"
    assert info.value.status == cls.status


def test_statuses_are_distinct():
    errors = [cls("failure") for cls in (NotFoundError, BadRequestError, UnauthorizedError)]
    statuses = {err.status for err in errors}
    assert statuses == {404, 400, 401}