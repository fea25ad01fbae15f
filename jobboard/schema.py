from typing import Any, Dict, List

REQUIRED_JOB_FIELDS = ["position", "email"]
OPTIONAL_JOB_FIELDS = [
    "skill",
    "company_name",
    "company_url",
    "description",
    "salary",
    "location",
]
# Fields update_job is allowed to overwrite, in merge order.
UPDATABLE_JOB_FIELDS = REQUIRED_JOB_FIELDS + OPTIONAL_JOB_FIELDS

REQUIRED_APPLICANT_FIELDS = ["name", "email"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _check_required(data: Dict[str, Any], fields: List[str], errors: List[str]) -> None:
    for f in fields:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")


def _check_optional(data: Dict[str, Any], errors: List[str]) -> None:
    for f in OPTIONAL_JOB_FIELDS:
        if f in data and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")


def validate_job_payload(data: Dict[str, Any]) -> List[str]:
    """
    Validate a payload for publishing a new job.

    Returns a list of validation error messages. Empty list means valid.
    Field contents are stored as given; only presence and type are checked.
    """
    errors: List[str] = []
    _check_required(data, REQUIRED_JOB_FIELDS, errors)
    _check_optional(data, errors)
    return errors


def validate_job_update(data: Dict[str, Any]) -> List[str]:
    """
    Validate a partial payload for update_job.

    Only updatable fields may appear. Required fields may be omitted,
    but when present they cannot be blanked out.
    """
    errors: List[str] = []

    for f in sorted(set(data) - set(UPDATABLE_JOB_FIELDS)):
        errors.append(f"Field '{f}' cannot be updated")

    for f in REQUIRED_JOB_FIELDS:
        if f in data and not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    _check_optional(data, errors)
    return errors


def validate_applicant_payload(data: Dict[str, Any]) -> List[str]:
    """Validate a payload for applying to a job."""
    errors: List[str] = []
    _check_required(data, REQUIRED_APPLICANT_FIELDS, errors)
    return errors
