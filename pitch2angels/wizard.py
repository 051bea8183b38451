# pitch2angels/wizard.py
"""
Three-step application form.

The wizard keeps every answer in memory, validates the current step before
letting the applicant move forward, and only talks to the API on the final
submit. Step validators are plain functions so the server can run the same
rules (see POST /api/applications/validate/{step}).
"""
import json
import logging
import mimetypes
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from pitch2angels.utils.form_options import (
    BUSINESS_CATEGORIES,
    BUSINESS_PHASES,
    COLLABORATOR_OPTIONS,
    PRONOUN_OPTIONS,
    REGIONS,
    option_values,
)
from pitch2angels.utils.text import is_blank, is_valid_email, word_count
from pitch2angels.utils.upload import is_allowed_upload

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024
MIN_DESCRIPTION_WORDS = 10
STEP_COUNT = 3

FILE_FIELDS = ("productImage", "paymentReceipt")

FIELDS = (
    "firstName", "lastName", "guardianName", "phone", "email", "city", "region",
    "pronouns", "occupation",
    "businessName", "website", "categories", "phase", "hasCollaborators",
    "collaboratorNames", "description",
    "productImage", "bankName", "accountHolderName", "transactionReference",
    "amountPaid", "paymentDate", "paymentReceipt", "agreedToTerms", "signature",
)

FileTuple = Tuple[str, bytes, str]


@dataclass
class Attachment:
    filename: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


def initial_form_data() -> Dict[str, Any]:
    data: Dict[str, Any] = {field: "" for field in FIELDS}
    data.update({
        "categories": [],
        "hasCollaborators": "no",
        "productImage": None,
        "paymentReceipt": None,
        "agreedToTerms": False,
    })
    return data


def _file_size(value) -> Optional[int]:
    """Size of an attachment, or of a {"size": n} descriptor; None if absent."""
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        try:
            return int(value.get("size") or 0)
        except (TypeError, ValueError):
            return 0
    size = getattr(value, "size", None)
    return size if isinstance(size, int) else None


def _parse_amount(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


# ------------------ Step validators ------------------

def validate_applicant_step(data: Dict[str, Any]) -> Dict[str, str]:
    errors = {}

    if is_blank(data.get("firstName")):
        errors["firstName"] = "First name is required"
    if is_blank(data.get("lastName")):
        errors["lastName"] = "Last name is required"
    if is_blank(data.get("phone")):
        errors["phone"] = "Phone number is required"
    if is_blank(data.get("email")):
        errors["email"] = "Email is required"
    elif not is_valid_email(data["email"]):
        errors["email"] = "Invalid email format"
    if is_blank(data.get("city")):
        errors["city"] = "City is required"

    region = data.get("region")
    if is_blank(region):
        errors["region"] = "Region is required"
    elif region not in REGIONS:
        errors["region"] = "Select a valid region"

    pronouns = data.get("pronouns")
    if is_blank(pronouns):
        errors["pronouns"] = "Pronouns are required"
    elif pronouns not in option_values(PRONOUN_OPTIONS):
        errors["pronouns"] = "Select a valid option"

    if is_blank(data.get("occupation")):
        errors["occupation"] = "Occupation is required"

    return errors


def validate_business_step(data: Dict[str, Any]) -> Dict[str, str]:
    errors = {}

    if is_blank(data.get("businessName")):
        errors["businessName"] = "Business name is required"

    categories = data.get("categories")
    if not categories or not isinstance(categories, list):
        errors["categories"] = "Select at least one category"
    elif any(category not in BUSINESS_CATEGORIES for category in categories):
        errors["categories"] = "Unknown category selected"

    phase = data.get("phase")
    if is_blank(phase):
        errors["phase"] = "Business phase is required"
    elif phase not in option_values(BUSINESS_PHASES):
        errors["phase"] = "Select a valid business phase"

    has_collaborators = data.get("hasCollaborators")
    if is_blank(has_collaborators):
        errors["hasCollaborators"] = "This field is required"
    elif has_collaborators not in option_values(COLLABORATOR_OPTIONS):
        errors["hasCollaborators"] = "Select a valid option"
    elif has_collaborators == "yes" and is_blank(data.get("collaboratorNames")):
        errors["collaboratorNames"] = "Collaborator names are required"

    return errors


def validate_pitch_step(data: Dict[str, Any]) -> Dict[str, str]:
    errors = {}

    if is_blank(data.get("description")):
        errors["description"] = "Description is required"
    elif word_count(data["description"]) < MIN_DESCRIPTION_WORDS:
        errors["description"] = f"Description should be at least {MIN_DESCRIPTION_WORDS} words"

    image_size = _file_size(data.get("productImage"))
    if image_size is None:
        errors["productImage"] = "Product image is required"
    elif image_size > MAX_FILE_SIZE:
        errors["productImage"] = "Image size should not exceed 10MB"

    if is_blank(data.get("bankName")):
        errors["bankName"] = "Bank name is required"
    if is_blank(data.get("accountHolderName")):
        errors["accountHolderName"] = "Account holder name is required"
    if is_blank(data.get("transactionReference")):
        errors["transactionReference"] = "Transaction reference is required"

    amount = data.get("amountPaid")
    if is_blank(amount):
        errors["amountPaid"] = "Amount paid is required"
    else:
        parsed = _parse_amount(amount)
        if parsed is None or parsed <= 0:
            errors["amountPaid"] = "Amount must be greater than 0"

    if is_blank(data.get("paymentDate")):
        errors["paymentDate"] = "Payment date is required"

    receipt_size = _file_size(data.get("paymentReceipt"))
    if receipt_size is None:
        errors["paymentReceipt"] = "Payment receipt is required"
    elif receipt_size > MAX_FILE_SIZE:
        errors["paymentReceipt"] = "File size should not exceed 10MB"

    if data.get("agreedToTerms") not in (True, "true"):
        errors["agreedToTerms"] = "You must agree to the terms"
    if is_blank(data.get("signature")):
        errors["signature"] = "Digital signature is required"

    return errors


STEP_VALIDATORS: Dict[int, Callable[[Dict[str, Any]], Dict[str, str]]] = {
    1: validate_applicant_step,
    2: validate_business_step,
    3: validate_pitch_step,
}


def validate_step(step: int, data: Dict[str, Any]) -> Dict[str, str]:
    if step not in STEP_VALIDATORS:
        raise ValueError(f"Step must be between 1 and {STEP_COUNT}, got {step}")
    return STEP_VALIDATORS[step](data)


# ------------------ State machine ------------------

class FormWizard:
    """In-memory state for one applicant working through the form"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.step = 1
        self.data = initial_form_data()
        self.errors: Dict[str, str] = {}
        self.server_error = ""
        self.submitted = False
        self.result: Optional[Dict[str, Any]] = None

    def _set_step(self, step: int) -> None:
        self.step = step
        self.errors = {}
        self.server_error = ""

    def _clear_error(self, field: str) -> None:
        self.errors.pop(field, None)

    # --- editing ---

    def update_field(self, field: str, value: Any) -> None:
        if field not in FIELDS:
            raise KeyError(f"Unknown form field: {field}")
        self.data[field] = value
        self._clear_error(field)

    def toggle_category(self, category: str) -> None:
        categories: List[str] = list(self.data["categories"])
        if category in categories:
            categories.remove(category)
        else:
            categories.append(category)
        self.data["categories"] = categories
        self._clear_error("categories")

    def attach_file(
        self,
        field: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None
    ) -> bool:
        """Attach a file; oversized or non image/PDF files are refused and leave the field unchanged."""
        if field not in FILE_FIELDS:
            raise KeyError(f"Not a file field: {field}")

        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"

        if len(content) > MAX_FILE_SIZE:
            self.errors[field] = (
                "Image size should not exceed 10MB" if field == "productImage"
                else "File size should not exceed 10MB"
            )
            return False

        if not is_allowed_upload(filename, content_type):
            self.errors[field] = "Only image and PDF files are allowed"
            return False

        self.update_field(field, Attachment(filename, content, content_type))
        return True

    # --- navigation ---

    def validate_step(self, step: Optional[int] = None) -> Dict[str, str]:
        return validate_step(step or self.step, self.data)

    def next_step(self) -> bool:
        errors = self.validate_step()
        if errors:
            self.errors = errors
            return False
        if self.step >= STEP_COUNT:
            return False
        self._set_step(self.step + 1)
        return True

    def prev_step(self) -> bool:
        if self.step <= 1:
            return False
        self._set_step(self.step - 1)
        return True

    def go_to(self, step: int) -> bool:
        """Completed steps can be revisited; later steps are reached only through next_step()."""
        if 1 <= step < self.step:
            self._set_step(step)
            return True
        return False

    # --- submission ---

    def first_invalid_step(self) -> Optional[int]:
        for step in range(1, STEP_COUNT + 1):
            if self.validate_step(step):
                return step
        return None

    def to_multipart(self) -> Tuple[Dict[str, str], Dict[str, FileTuple]]:
        fields: Dict[str, str] = {}
        files: Dict[str, FileTuple] = {}

        for key, value in self.data.items():
            if value is None or value == "":
                continue
            if isinstance(value, Attachment):
                files[key] = (value.filename, value.content, value.content_type)
            elif key == "categories":
                fields[key] = json.dumps(value)
            elif key == "agreedToTerms":
                fields[key] = "true" if value else "false"
            else:
                fields[key] = str(value)

        return fields, files

    def submit(self, client) -> Optional[Dict[str, Any]]:
        """
        Post the form through an ApplicationClient.

        Returns the server payload on success. On a validation failure the
        wizard moves to the first failing step and returns None; server
        errors are kept in server_error.
        """
        from pitch2angels.client import ApplicationClientError

        self.server_error = ""
        invalid_step = self.first_invalid_step()
        if invalid_step is not None:
            if invalid_step != self.step:
                self._set_step(invalid_step)
            self.errors = self.validate_step(invalid_step)
            logger.info(f"Submission blocked, step {invalid_step} has errors: {sorted(self.errors)}")
            return None

        fields, files = self.to_multipart()
        try:
            result = client.submit_application(fields, files)
        except ApplicationClientError as e:
            self.server_error = e.message
            logger.warning(f"Submission failed ({e.status_code}): {e.message}")
            return None

        self.submitted = True
        self.result = result
        logger.info(f"🎉 Application submitted, id {result.get('id')}")
        return result
