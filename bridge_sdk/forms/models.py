"""Pydantic models for profile form requests and form items."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bridge_sdk.config import SDKConfig
from bridge_sdk.errors import InvalidAnswerError
from bridge_sdk.forms.answer_formats import (
    AnswerFormat,
    AutocapitalizationType,
    EmailAnswerFormat,
    KeyboardType,
    TextAnswerFormat,
)

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

# POSIX classes used in validation regexes that Python's re does not know
POSIX_CLASSES = {
    "[[:ascii:]]": r"[\x00-\x7F]",
    "[[:digit:]]": r"[0-9]",
    "[[:alpha:]]": r"[A-Za-z]",
    "[[:alnum:]]": r"[A-Za-z0-9]",
}


class ProfileInfoOption(str, Enum):
    """Profile fields a form can ask for."""

    EMAIL = "email"
    PASSWORD = "password"
    EXTERNAL_ID = "externalID"
    NAME = "name"
    BIRTHDATE = "birthdate"
    GENDER = "gender"
    BLOOD_TYPE = "bloodType"
    FITZPATRICK_SKIN_TYPE = "fitzpatrickSkinType"
    WHEELCHAIR_USE = "wheelchairUse"

    @classmethod
    def from_name(cls, name: Any) -> "ProfileInfoOption | None":
        """Look up an option by its wire name, or None if unrecognized."""
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None


class SurveyItemType(str, Enum):
    """Kinds of account/profile survey steps."""

    REGISTRATION = "account.registration"
    LOGIN = "account.login"
    EXTERNAL_ID = "account.externalID"
    PROFILE = "account.profile"


class ExternalIDOptions(BaseModel):
    """Keyboard settings for the external ID field."""

    autocapitalization: AutocapitalizationType = AutocapitalizationType.ALL_CHARACTERS
    keyboard: KeyboardType = KeyboardType.ASCII_CAPABLE

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_config(cls, config: SDKConfig) -> "ExternalIDOptions":
        """Module-wide defaults as configured."""
        return cls(
            autocapitalization=AutocapitalizationType.from_key(config.external_id_autocapitalization),
            keyboard=KeyboardType.from_key(config.external_id_keyboard),
        )

    @classmethod
    def from_override(cls, record: dict[str, Any]) -> "ExternalIDOptions":
        """Read overrides from an externalID survey entry.

        Sub-fields the entry leaves out resolve to none/default, not to the
        module-wide defaults.
        """
        autocap = record.get("autocapitalizationType")
        keyboard = record.get("keyboardType")
        return cls(
            autocapitalization=(
                AutocapitalizationType.from_key(autocap)
                if isinstance(autocap, str)
                else AutocapitalizationType.NONE
            ),
            keyboard=KeyboardType.from_key(keyboard) if isinstance(keyboard, str) else KeyboardType.DEFAULT,
        )


class ProfileInfoRequest(BaseModel):
    """Profile fields requested by a survey item, in display order."""

    includes: list[ProfileInfoOption]
    external_id_options: ExternalIDOptions = Field(default_factory=ExternalIDOptions)
    custom_options: list[Any] = Field(default_factory=list)

    @classmethod
    def from_includes(cls, includes: list[ProfileInfoOption]) -> "ProfileInfoRequest":
        """Request the given fields with default external ID settings."""
        return cls(includes=list(includes))

    @classmethod
    def for_external_id(cls, options: ExternalIDOptions) -> "ProfileInfoRequest":
        """Request only the external ID field, with the given keyboard settings."""
        return cls(includes=[ProfileInfoOption.EXTERNAL_ID], external_id_options=options)


class FormContext(BaseModel):
    """Context the form is being built for."""

    is_registration_flow: bool = False

    @classmethod
    def for_survey_item_type(cls, survey_item_type: SurveyItemType) -> "FormContext":
        return cls(is_registration_flow=survey_item_type == SurveyItemType.REGISTRATION)


class SurveyItem(BaseModel):
    """Declarative description of a survey step."""

    identifier: str
    type: str | None = None
    title: str | None = None
    text: str | None = None
    footnote: str | None = None
    items: list[Any] | None = None


class FormItemDescriptor(BaseModel):
    """A single form item handed to the UI toolkit."""

    identifier: str
    text: str | None = None
    placeholder: str | None = None
    answer_format: AnswerFormat
    optional: bool = False
    confirmation_of: str | None = None  # identifier of the item this one must match
    confirmation_error: str | None = None

    @property
    def required(self) -> bool:
        return not self.optional

    @property
    def validation_regex(self) -> str | None:
        """The answer format's validation regex, if any."""
        if isinstance(self.answer_format, TextAnswerFormat):
            return self.answer_format.validation_regex
        return None

    def validate_answer(self, value: Any) -> None:
        """Check an answer against this item's validation rules.

        Confirmation matching needs the other answer and is handled by the form.

        Raises:
            InvalidAnswerError: If the answer fails validation.
        """
        if value is None:
            if self.required:
                raise InvalidAnswerError(self.identifier, f"{self.identifier!r} is required")
            return

        if isinstance(self.answer_format, EmailAnswerFormat):
            if not isinstance(value, str) or not EMAIL_PATTERN.fullmatch(value):
                raise InvalidAnswerError(self.identifier, f"{value!r} is not a valid email address")
            return

        regex = self.validation_regex
        if regex is None:
            return
        if not isinstance(value, str) or not re.fullmatch(python_pattern(regex), value):
            message = self.answer_format.invalid_message or f"Invalid answer for {self.identifier!r}"
            raise InvalidAnswerError(self.identifier, message)


def python_pattern(regex: str) -> str:
    """Translate POSIX bracket classes into Python re syntax."""
    for posix, replacement in POSIX_CLASSES.items():
        regex = regex.replace(posix, replacement)
    return regex
