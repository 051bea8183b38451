import json

import pytest

from conftest import DESCRIPTION, PDF_BYTES, PNG_BYTES
from pitch2angels.client import ApplicationClient
from pitch2angels.wizard import (
    MAX_FILE_SIZE,
    Attachment,
    FormWizard,
    validate_step,
)


def fill_applicant(wizard, **overrides):
    values = {
        "firstName": "Ama",
        "lastName": "Owusu",
        "phone": "0244000000",
        "email": "ama@example.com",
        "city": "Ho",
        "region": "Volta",
        "pronouns": "she/her",
        "occupation": "Baker",
    }
    values.update(overrides)
    for field, value in values.items():
        wizard.update_field(field, value)


def fill_business(wizard):
    wizard.update_field("businessName", "Ama's Bakery")
    wizard.toggle_category("Food & Beverage")
    wizard.update_field("phase", "operating")


def fill_pitch(wizard):
    wizard.update_field("description", DESCRIPTION)
    wizard.attach_file("productImage", "bread.png", PNG_BYTES)
    wizard.attach_file("paymentReceipt", "receipt.pdf", PDF_BYTES)
    wizard.update_field("bankName", "Ecobank")
    wizard.update_field("accountHolderName", "Ama Owusu")
    wizard.update_field("transactionReference", "MOMO-991")
    wizard.update_field("amountPaid", "200")
    wizard.update_field("paymentDate", "2025-02-01")
    wizard.update_field("agreedToTerms", True)
    wizard.update_field("signature", "Ama Owusu")


@pytest.fixture
def wizard():
    return FormWizard()


@pytest.fixture
def completed_wizard(wizard):
    fill_applicant(wizard)
    assert wizard.next_step()
    fill_business(wizard)
    assert wizard.next_step()
    fill_pitch(wizard)
    return wizard


def test_initial_state(wizard):
    assert wizard.step == 1
    assert wizard.data["categories"] == []
    assert wizard.data["hasCollaborators"] == "no"
    assert wizard.data["agreedToTerms"] is False
    assert wizard.errors == {}
    assert wizard.submitted is False


def test_next_step_blocks_on_errors(wizard):
    assert wizard.next_step() is False

    assert wizard.step == 1
    assert wizard.errors["firstName"] == "First name is required"
    assert wizard.errors["region"] == "Region is required"
    assert "guardianName" not in wizard.errors


def test_next_step_advances_and_clears_errors(wizard):
    wizard.next_step()
    fill_applicant(wizard)

    assert wizard.next_step() is True
    assert wizard.step == 2
    assert wizard.errors == {}


def test_invalid_email_and_region(wizard):
    fill_applicant(wizard, email="ama@nowhere", region="Lagos")

    assert wizard.next_step() is False
    assert wizard.errors == {"email": "Invalid email format", "region": "Select a valid region"}


def test_editing_a_field_clears_its_error(wizard):
    wizard.next_step()
    wizard.update_field("firstName", "Ama")

    assert "firstName" not in wizard.errors
    assert "lastName" in wizard.errors


def test_unknown_field_is_rejected(wizard):
    with pytest.raises(KeyError):
        wizard.update_field("favouriteColour", "blue")


def test_toggle_category(wizard):
    wizard.toggle_category("Technology")
    wizard.toggle_category("Fitness")
    wizard.toggle_category("Technology")

    assert wizard.data["categories"] == ["Fitness"]


def test_collaborator_names_required_when_applying_with_others():
    data = {
        "businessName": "Team Co",
        "categories": ["Technology"],
        "phase": "idea",
        "hasCollaborators": "yes",
        "collaboratorNames": " ",
    }

    assert validate_step(2, data) == {"collaboratorNames": "Collaborator names are required"}


def test_business_step_rejects_unknown_category():
    errors = validate_step(2, {
        "businessName": "X",
        "categories": ["Space Tourism"],
        "phase": "idea",
        "hasCollaborators": "no",
    })

    assert errors == {"categories": "Unknown category selected"}


def test_pitch_step_rules():
    errors = validate_step(3, {
        "description": "Too short to count",
        "amountPaid": "0",
        "agreedToTerms": False,
    })

    assert errors["description"] == "Description should be at least 10 words"
    assert errors["amountPaid"] == "Amount must be greater than 0"
    assert errors["agreedToTerms"] == "You must agree to the terms"
    assert errors["productImage"] == "Product image is required"
    assert errors["paymentReceipt"] == "Payment receipt is required"


def test_validate_step_rejects_unknown_step():
    with pytest.raises(ValueError):
        validate_step(7, {})


def test_attach_file_accepts_images(wizard):
    assert wizard.attach_file("productImage", "bread.png", PNG_BYTES) is True

    attachment = wizard.data["productImage"]
    assert isinstance(attachment, Attachment)
    assert attachment.content_type == "image/png"
    assert attachment.size == len(PNG_BYTES)


def test_attach_file_refuses_oversized_file(wizard):
    assert wizard.attach_file("productImage", "huge.png", b"0" * (MAX_FILE_SIZE + 1)) is False

    assert wizard.data["productImage"] is None
    assert wizard.errors["productImage"] == "Image size should not exceed 10MB"


def test_attach_file_refuses_other_types(wizard):
    assert wizard.attach_file("paymentReceipt", "receipt.docx", b"PK\x03\x04") is False

    assert wizard.data["paymentReceipt"] is None
    assert wizard.errors["paymentReceipt"] == "Only image and PDF files are allowed"


def test_navigation(wizard):
    assert wizard.prev_step() is False
    assert wizard.go_to(2) is False

    fill_applicant(wizard)
    wizard.next_step()
    fill_business(wizard)
    wizard.next_step()

    assert wizard.step == 3
    assert wizard.next_step() is False
    assert wizard.go_to(1) is True
    assert wizard.step == 1
    assert wizard.go_to(3) is False
    assert wizard.data["businessName"] == "Ama's Bakery"


def test_to_multipart(completed_wizard):
    fields, files = completed_wizard.to_multipart()

    assert json.loads(fields["categories"]) == ["Food & Beverage"]
    assert fields["agreedToTerms"] == "true"
    assert fields["hasCollaborators"] == "no"
    assert "guardianName" not in fields
    assert "productImage" not in fields
    assert files["productImage"] == ("bread.png", PNG_BYTES, "image/png")
    assert files["paymentReceipt"] == ("receipt.pdf", PDF_BYTES, "application/pdf")


def test_submit_goes_back_to_first_invalid_step(completed_wizard):
    completed_wizard.update_field("email", "")

    assert completed_wizard.submit(client=None) is None
    assert completed_wizard.step == 1
    assert completed_wizard.errors == {"email": "Email is required"}
    assert completed_wizard.submitted is False


def test_submit_through_api(completed_wizard, client):
    api = ApplicationClient(http=client)

    result = completed_wizard.submit(api)

    assert result["success"] is True
    assert completed_wizard.submitted is True
    assert completed_wizard.result == result

    stored = api.get_application(result["id"])
    assert stored["email"] == "ama@example.com"
    assert stored["categories"] == ["Food & Beverage"]
    assert stored["agreed_to_terms"] is True


def test_submit_keeps_server_error(completed_wizard, client, submit):
    submit(email="ama@example.com")

    assert completed_wizard.submit(ApplicationClient(http=client)) is None
    assert completed_wizard.server_error == "An application with this email already exists"
    assert completed_wizard.submitted is False
    assert completed_wizard.step == 3


def test_reset(completed_wizard):
    completed_wizard.reset()

    assert completed_wizard.step == 1
    assert completed_wizard.data["businessName"] == ""
    assert completed_wizard.data["productImage"] is None


def test_wrongly_typed_values_become_field_errors(wizard):
    fill_applicant(wizard, email=5)

    assert wizard.next_step() is False
    assert wizard.errors == {"email": "Invalid email format"}


def test_step_change_clears_server_error(completed_wizard, client, submit):
    submit(email="ama@example.com")
    completed_wizard.submit(ApplicationClient(http=client))
    assert completed_wizard.server_error

    assert completed_wizard.prev_step() is True
    assert completed_wizard.server_error == ""
    assert completed_wizard.errors == {}
