from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from bloodbridge.domain.requests.lifecycle import (
    DONOR_FIELDS,
    RECEIVER_FIELDS,
    build_request_payload,
    can_submit,
    compose_location,
    validate_request_submission,
)
from bloodbridge.domain.requests.schemas import DonorDraft, Location, ReceiverDraft, parse_request_draft
from bloodbridge.errors import AuthenticationRequired, MissingRequiredField

NOW = datetime(2030, 4, 1, 9, 30, tzinfo=timezone.utc)


def receiver(**overrides):
    data = {
        "type": "receiver",
        "user_id": "user-1",
        "bloodGroup": "O+",
        "phone": "9990001111",
        "name": "A",
        "location": {"state": "Telangana", "district": "Hyderabad"},
        "urgency": "urgent",
    }
    data.update(overrides)
    return parse_request_draft(data)


def donor(**overrides):
    data = {
        "type": "donor",
        "user_id": "user-2",
        "bloodGroup": "B-",
        "phone": "9848022338",
        "name": "B",
        "location": {"state": "Andhra Pradesh", "district": "Guntur"},
        "appointmentDate": "2030-05-01",
        "appointmentTime": "10:00",
    }
    data.update(overrides)
    return parse_request_draft(data)


class TestValidateRequestSubmission:
    def test_receiver_without_urgency_is_invalid(self):
        draft = parse_request_draft(
            {
                "type": "receiver",
                "user_id": "user-1",
                "bloodGroup": "O+",
                "phone": "9990001111",
                "name": "A",
                "location": {"state": "Telangana", "district": "Hyderabad"},
            }
        )

        result = validate_request_submission(draft, location_schema="district")

        assert not result.valid
        assert result.field == "urgency"
        assert "urgent" in result.reason

    def test_complete_receiver_is_valid(self):
        result = validate_request_submission(receiver(), location_schema="district")
        assert result.valid
        assert result.field is None

    def test_reports_first_missing_field_in_form_order(self):
        draft = receiver(name="  ", phone=None, urgency=None)
        result = validate_request_submission(draft, location_schema="district")
        assert result.field == "name"

        draft = receiver(phone=None, urgency=None)
        result = validate_request_submission(draft, location_schema="district")
        assert result.field == "phone"

    def test_missing_state_and_district(self):
        result = validate_request_submission(receiver(location={}), location_schema="district")
        assert result.field == "location.state"

        result = validate_request_submission(
            receiver(location={"state": "Telangana"}), location_schema="district"
        )
        assert result.field == "location.district"

    def test_location_schema_selects_required_levels(self):
        draft = receiver(location={"state": "Telangana", "constituency": "Secunderabad"})

        assert validate_request_submission(draft, location_schema="constituency").valid
        assert validate_request_submission(draft, location_schema="district").field == "location.district"
        assert validate_request_submission(draft, location_schema="both").field == "location.district"

    def test_unknown_location_schema(self):
        with pytest.raises(ValueError):
            validate_request_submission(receiver(), location_schema="pincode")

    def test_missing_user_id_raises_authentication_required(self):
        with pytest.raises(AuthenticationRequired):
            validate_request_submission(receiver(user_id=None))
        assert can_submit(receiver(user_id=None)) is False

    def test_donor_needs_appointment_when_booking_required(self):
        draft = donor(appointmentTime=None)

        result = validate_request_submission(draft, require_booking=True, location_schema="district")
        assert result.field == "appointment_time"

        draft = donor(appointmentDate=None, appointmentTime=None)
        result = validate_request_submission(draft, require_booking=False, location_schema="district")
        assert result.valid

    def test_optional_appointment_cannot_be_half_filled(self):
        result = validate_request_submission(
            donor(appointmentTime=None), require_booking=False, location_schema="district"
        )
        assert result.field == "appointment_time"

        result = validate_request_submission(
            donor(appointmentDate=None), require_booking=False, location_schema="district"
        )
        assert result.field == "appointment_date"

        result = validate_request_submission(
            donor(appointmentTime="  "), require_booking=False, location_schema="district"
        )
        assert result.field == "appointment_time"

    def test_donor_does_not_need_urgency(self):
        assert validate_request_submission(donor(), location_schema="district").valid

    def test_raise_for_invalid(self):
        result = validate_request_submission(receiver(urgency=None), location_schema="district")
        with pytest.raises(MissingRequiredField) as exc_info:
            result.raise_for_invalid()
        assert exc_info.value.field == "urgency"

    def test_can_submit(self):
        assert can_submit(receiver(), location_schema="district")
        assert not can_submit(receiver(bloodGroup=None), location_schema="district")


class TestDraftParsing:
    def test_type_selects_draft_class(self):
        assert isinstance(receiver(), ReceiverDraft)
        assert isinstance(donor(), DonorDraft)

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_request_draft({"type": "volunteer", "name": "X"})

    def test_blood_group_and_phone_are_normalized(self):
        draft = receiver(bloodGroup=" ab - ", phone="+91 99900-01111")
        assert draft.blood_group == "AB-"
        assert draft.phone == "9990001111"

    def test_invalid_blood_group(self):
        with pytest.raises(ValidationError):
            receiver(bloodGroup="C+")

    def test_urgency_is_lowercased_and_checked(self):
        assert receiver(urgency="URGENT").urgency == "urgent"
        with pytest.raises(ValidationError):
            receiver(urgency="whenever")


class TestBuildRequestPayload:
    def test_receiver_nulls_donor_fields(self):
        payload = build_request_payload(receiver(purpose="  Surgery "), now=NOW)

        assert payload["purpose"] == "Surgery"
        assert payload["urgency"] == "urgent"
        for field in DONOR_FIELDS:
            assert payload[field] is None

    def test_donor_nulls_receiver_fields(self):
        payload = build_request_payload(donor(medicalHistory="None"), now=NOW)

        assert payload["available_to_donate"] is True
        assert payload["medical_history"] == "None"
        for field in RECEIVER_FIELDS:
            assert payload[field] is None

    def test_donor_fields_sent_on_a_receiver_draft_are_dropped(self):
        payload = build_request_payload(receiver(medicalHistory="Asthma", availableToDonate=True), now=NOW)
        assert payload["medical_history"] is None
        assert payload["available_to_donate"] is None

    def test_whatsapp_defaults_to_phone(self):
        assert build_request_payload(receiver(), now=NOW)["whatsapp"] == "9990001111"
        assert build_request_payload(receiver(whatsapp="9000000001"), now=NOW)["whatsapp"] == "9000000001"

    def test_location_is_composed_and_kept_structured(self):
        draft = receiver(location={"state": "Telangana", "district": "Hyderabad", "hospital": " NIMS "})
        payload = build_request_payload(draft, now=NOW)

        assert payload["location"] == "NIMS, Hyderabad, Telangana"
        assert payload["location_structured"]["hospital"] == "NIMS"
        assert payload["location_structured"]["state"] == "Telangana"

    def test_plain_text_location_is_trimmed(self):
        payload = build_request_payload(receiver(location="  Pune  "), now=NOW)
        assert payload["location"] == "Pune"
        assert payload["location_structured"] is None

    def test_timestamps_are_stamped(self):
        payload = build_request_payload(receiver(), now=NOW)
        assert payload["created_at"] == NOW
        assert payload["updated_at"] == NOW

    @pytest.mark.parametrize("make_draft", [receiver, donor])
    def test_rebuilding_from_payload_is_idempotent(self, make_draft):
        first = build_request_payload(make_draft(), now=NOW)
        later = datetime(2031, 1, 1, tzinfo=timezone.utc)

        second = build_request_payload(parse_request_draft(first), now=later)

        assert second == first


def test_compose_location_skips_blank_levels():
    location = Location(state="Telangana", district="", area="Ameerpet")
    assert compose_location(location) == "Ameerpet, Telangana"
    assert compose_location(Location()) is None
