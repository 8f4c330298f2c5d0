"""Pure validation rules for session input."""

import re

from wellness_sessions.errors import FieldViolation

TITLE_MAX_LENGTH = 100
TAG_MAX_LENGTH = 30

_URL_PATTERN = re.compile(
    r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?$",
    re.IGNORECASE,
)


def normalize_tags(tags: list[str]) -> list[str]:
    """Trim every tag and drop the ones left empty, keeping order and repeats."""
    return [tag.strip() for tag in tags if tag.strip()]


def parse_tag_string(raw: str) -> list[str]:
    """Split a comma-joined tag string as typed into the editor."""
    return normalize_tags(raw.split(","))


def is_valid_url(value: str) -> bool:
    """Return true when the value has a basic URL shape."""
    return bool(_URL_PATTERN.match(value.strip()))


def validate_draft(title: str, tags: list[str], data_url: str) -> list[FieldViolation]:
    """Return every field violation for a draft, in field order."""
    violations: list[FieldViolation] = []
    cleaned_title = title.strip()
    if not cleaned_title:
        violations.append(FieldViolation("title", "Title is required"))
    elif len(cleaned_title) > TITLE_MAX_LENGTH:
        violations.append(
            FieldViolation(
                "title", f"Title cannot exceed {TITLE_MAX_LENGTH} characters"
            )
        )
    if any(len(tag) > TAG_MAX_LENGTH for tag in normalize_tags(tags)):
        violations.append(
            FieldViolation("tags", f"Tag cannot exceed {TAG_MAX_LENGTH} characters")
        )
    if not is_valid_url(data_url):
        violations.append(FieldViolation("json_file_url", "Please enter a valid URL"))
    return violations
