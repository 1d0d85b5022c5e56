import pytest

from payfast_bridge.challans import parse_record_key
from payfast_bridge.errors import InvalidIdentifierError, MissingFieldError
from payfast_bridge.notifications import Notification, resolve_field


def test_challan_number_keeps_embedded_hyphens():
    assert parse_record_key("CHALLAN-CH-20251124-19981-1764448963246") == "CH-20251124-19981"


def test_single_segment_challan_number():
    assert parse_record_key("CHALLAN-CH001-1764448963246") == "CH001"


@pytest.mark.parametrize("basket_id", ["CHALLAN-1764448963246", "A-B", "CHALLAN", "", None])
def test_too_few_segments(basket_id):
    with pytest.raises(InvalidIdentifierError) as exc:
        parse_record_key(basket_id)
    assert exc.value.status_code == 400
    assert exc.value.payload == {"basketId": basket_id}


def test_empty_challan_number():
    with pytest.raises(InvalidIdentifierError):
        parse_record_key("CHALLAN--1764448963246")


def test_resolve_field_prefers_lower_snake():
    data = {"basket_id": "lower", "BASKET_ID": "upper"}
    assert resolve_field(data, "basket_id") == "lower"


def test_resolve_field_falls_back_to_upper_snake():
    assert resolve_field({"BASKET_ID": "upper"}, "basket_id") == "upper"


def test_resolve_field_treats_empty_as_missing():
    assert resolve_field({"err_code": "", "ERROR_CODE": "97"}, "err_code") == "97"
    assert resolve_field({"err_code": ""}, "err_code", "000") == "000"


def test_notification_defaults():
    notification = Notification.from_mapping({"BASKET_ID": "CHALLAN-X-1", "VALIDATION_HASH": "ab"})
    assert notification.err_code == "000"
    assert notification.email_address == ""
    assert notification.transaction_id is None


def test_notification_requires_basket_and_hash():
    with pytest.raises(MissingFieldError) as exc:
        Notification.from_mapping({"basket_id": "CHALLAN-X-1"}).require()
    assert exc.value.payload["received"] == {"basketId": "CHALLAN-X-1", "validationHash": None}
