import pytest

from hubcoord.api_errors import ServerError, make_error, make_server_error


def test_make_error_nests_message_under_field():
    assert make_error("channel", "must not be empty") == {"errors": {"channel": ["must not be empty"]}}


def test_make_server_error_default_message():
    assert make_server_error() == {"errors": ["Internal Server Error"]}
    assert make_server_error(None) == make_server_error()


def test_make_server_error_custom_message():
    assert make_server_error("Get context temporary unavailable") == {
        "errors": ["Get context temporary unavailable"]
    }


def test_make_server_error_keeps_empty_message():
    assert make_server_error("") == {"errors": [""]}


def test_server_error_carries_body_and_status():
    with pytest.raises(ServerError) as info:
        raise ServerError("Get partition temporary unavailable")
    assert info.value.status_code == 500
    assert info.value.body == make_server_error("Get partition temporary unavailable")
    assert str(info.value) == "Get partition temporary unavailable"