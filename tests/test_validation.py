import pytest

from conftest import SUBMITTER, inquiry_payload
from intake_ext.errors import ValidationError
from intake_ext.validation import (CUSTOM_BUDGET, DEFAULT_CATEGORY_META, category_meta, is_valid_submitter_id,
                                   validate_contact, validate_inquiry)


def test_inquiry_maps_website_keys():
    fields = validate_inquiry(inquiry_payload())
    assert fields == {
        "submitter_name": "echo_fan",
        "submitter_id": SUBMITTER,
        "subject_name": "Echo Hangout",
        "subject_reference": "https://discord.gg/echo",
        "category": "Gaming Community",
        "budget": "$50",
        "payment_method": "PayPal",
        "details": "Ticket bot with transcripts",
    }


def test_inquiry_accepts_snake_case_and_optional_reference():
    payload = {
        "submitter_name": "a", "submitter_id": SUBMITTER, "subject_name": "s", "category": "Other",
        "budget": "$10", "payment_method": "Card", "details": "d",
    }
    assert validate_inquiry(payload)["subject_reference"] is None


@pytest.mark.parametrize("missing", ["discordUsername", "serverName", "serverType", "budget",
                                     "paymentMethod", "projectDetails", "clientDiscordId"])
def test_inquiry_missing_field(missing):
    payload = inquiry_payload()
    payload[missing] = "   "
    with pytest.raises(ValidationError) as exc:
        validate_inquiry(payload)
    assert exc.value.code == "missing_field"


@pytest.mark.parametrize("bad_id", ["1234567890123456", "123456789012345678901", "12345678901234567a", "-12345678901234567",
                                    "١" * 18, "१" * 18])
def test_inquiry_rejects_bad_identifier(bad_id):
    with pytest.raises(ValidationError) as exc:
        validate_inquiry(inquiry_payload(clientDiscordId=bad_id))
    assert exc.value.code == "invalid_identifier"


def test_identifier_bounds():
    assert is_valid_submitter_id("1" * 17)
    assert is_valid_submitter_id("1" * 20)
    assert is_valid_submitter_id(int("1" * 18))
    assert not is_valid_submitter_id(None)


def test_custom_budget_sentinel_is_translated():
    assert validate_inquiry(inquiry_payload(budget=CUSTOM_BUDGET))["budget"] == "Custom (to discuss)"


def test_unknown_category_is_accepted_with_fallback_meta():
    fields = validate_inquiry(inquiry_payload(serverType="Unknown Category"))
    assert fields["category"] == "Unknown Category"
    assert category_meta("Unknown Category") == DEFAULT_CATEGORY_META
    assert category_meta("ERLC / Roblox RP")["emoji"] == "🚔"


def test_contact_requires_message():
    with pytest.raises(ValidationError):
        validate_contact({"discordUsername": "a", "clientDiscordId": SUBMITTER})
    assert validate_contact({"discordUsername": "a", "clientDiscordId": SUBMITTER, "message": " hi "}) == {
        "submitter_name": "a", "submitter_id": SUBMITTER, "message": "hi",
    }


def test_identifier_must_be_ascii_digits():
    assert not is_valid_submitter_id("١" * 18)
    assert not is_valid_submitter_id("1" * 18 + "\n")
