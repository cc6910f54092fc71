"""Prompt and placeholder strings for profile forms.

String lookup belongs to the host app; a Localizer is anything with a
`localized_string()` method. StringTable is the English default.
"""

from typing import Protocol


class Localizer(Protocol):
    """Protocol for looking up user-facing strings by key."""

    def localized_string(self, key: str) -> str:
        ...


DEFAULT_STRINGS: dict[str, str] = {
    "EMAIL_FORM_ITEM_TITLE": "Email",
    "EMAIL_FORM_ITEM_PLACEHOLDER": "jappleseed@example.com",
    "PASSWORD_FORM_ITEM_TITLE": "Password",
    "PASSWORD_FORM_ITEM_PLACEHOLDER": "Enter password",
    "CONFIRM_PASSWORD_FORM_ITEM_TITLE": "Confirm",
    "CONFIRM_PASSWORD_FORM_ITEM_PLACEHOLDER": "Enter password again",
    "CONFIRM_PASSWORD_ERROR_MESSAGE": "Passwords do not match",
    "INVALID_PASSWORD_LENGTH": "Passwords must be {} to {} characters long",
    "EXTERNAL_ID_FORM_ITEM_TITLE": "Participant ID",
    "EXTERNAL_ID_FORM_ITEM_PLACEHOLDER": "Enter participant ID",
    "NAME_FORM_ITEM_TITLE": "Name",
    "NAME_FORM_ITEM_PLACEHOLDER": "Enter full name",
    "DOB_FORM_ITEM_TITLE": "Birthdate",
    "DOB_FORM_ITEM_PLACEHOLDER": "Pick a date",
    "GENDER_FORM_ITEM_TITLE": "Gender",
    "GENDER_FORM_ITEM_PLACEHOLDER": "Pick a gender",
    "BLOOD_TYPE_FORM_ITEM_TITLE": "Blood Type",
    "BLOOD_TYPE_FORM_ITEM_PLACEHOLDER": "Pick a blood type",
    "FITZPATRICK_SKIN_TYPE_FORM_ITEM_TITLE": "Skin Type",
    "FITZPATRICK_SKIN_TYPE_FORM_ITEM_PLACEHOLDER": "Pick a skin type",
    "WHEELCHAIR_USE_FORM_ITEM_TITLE": "Do you use a wheelchair?",
}


class StringTable:
    """Dictionary-backed Localizer. Unknown keys are returned unchanged."""

    def __init__(self, strings: dict[str, str] | None = None) -> None:
        self.strings = {**DEFAULT_STRINGS, **(strings or {})}

    def localized_string(self, key: str) -> str:
        return self.strings.get(key, key)


def localized_format(localizer: Localizer, key: str, *args: object) -> str:
    """Look up a format string and fill in its `{}` placeholders."""
    template = localizer.localized_string(key)
    try:
        return template.format(*args)
    except (IndexError, KeyError, ValueError):
        return template
