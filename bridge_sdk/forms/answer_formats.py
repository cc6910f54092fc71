"""Answer formats describing how a form item is rendered and answered.

These mirror what the UI toolkit understands. Each format is tagged by
`kind` so a serialized form item can be read back unambiguously.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class AutocapitalizationType(str, Enum):
    """Keyboard autocapitalization behaviour."""

    NONE = "none"
    WORDS = "words"
    SENTENCES = "sentences"
    ALL_CHARACTERS = "allCharacters"

    @classmethod
    def from_key(cls, key: str) -> "AutocapitalizationType":
        """Resolve a name from a survey description; unknown names map to NONE."""
        try:
            return cls(key)
        except ValueError:
            return cls.NONE


class KeyboardType(str, Enum):
    """Software keyboard variants."""

    DEFAULT = "default"
    ASCII_CAPABLE = "asciiCapable"
    NUMBERS_AND_PUNCTUATION = "numbersAndPunctuation"
    URL = "URL"
    NUMBER_PAD = "numberPad"
    PHONE_PAD = "phonePad"
    NAME_PHONE_PAD = "namePhonePad"
    EMAIL_ADDRESS = "emailAddress"
    DECIMAL_PAD = "decimalPad"
    TWITTER = "twitter"
    WEB_SEARCH = "webSearch"
    ASCII_CAPABLE_NUMBER_PAD = "asciiCapableNumberPad"

    @classmethod
    def from_key(cls, key: str) -> "KeyboardType":
        """Resolve a name from a survey description; unknown names map to DEFAULT."""
        try:
            return cls(key)
        except ValueError:
            return cls.DEFAULT


class CharacteristicType(str, Enum):
    """Health-profile characteristics a form item can be backed by."""

    DATE_OF_BIRTH = "dateOfBirth"
    BIOLOGICAL_SEX = "biologicalSex"
    BLOOD_TYPE = "bloodType"
    FITZPATRICK_SKIN_TYPE = "fitzpatrickSkinType"
    WHEELCHAIR_USE = "wheelchairUse"


class TextChoice(BaseModel):
    """A single labelled choice."""

    text: str
    value: str


CHARACTERISTIC_CHOICES: dict[CharacteristicType, list[TextChoice]] = {
    CharacteristicType.BIOLOGICAL_SEX: [
        TextChoice(text="Female", value="HKBiologicalSexFemale"),
        TextChoice(text="Male", value="HKBiologicalSexMale"),
        TextChoice(text="Other", value="HKBiologicalSexOther"),
    ],
    CharacteristicType.BLOOD_TYPE: [
        TextChoice(text=label, value=value)
        for label, value in [
            ("A+", "HKBloodTypeAPositive"),
            ("A-", "HKBloodTypeANegative"),
            ("B+", "HKBloodTypeBPositive"),
            ("B-", "HKBloodTypeBNegative"),
            ("AB+", "HKBloodTypeABPositive"),
            ("AB-", "HKBloodTypeABNegative"),
            ("O+", "HKBloodTypeOPositive"),
            ("O-", "HKBloodTypeONegative"),
        ]
    ],
    CharacteristicType.FITZPATRICK_SKIN_TYPE: [
        TextChoice(text=f"Type {numeral}", value=f"HKFitzpatrickSkinType{numeral}")
        for numeral in ["I", "II", "III", "IV", "V", "VI"]
    ],
    CharacteristicType.WHEELCHAIR_USE: [
        TextChoice(text="No", value="HKWheelchairUseNo"),
        TextChoice(text="Yes", value="HKWheelchairUseYes"),
    ],
}


class EmailAnswerFormat(BaseModel):
    """Single-line text validated as an email address."""

    kind: Literal["email"] = "email"


class TextAnswerFormat(BaseModel):
    """Free text entry."""

    kind: Literal["text"] = "text"
    multiple_lines: bool = True
    secure_text_entry: bool = False
    autocapitalization: AutocapitalizationType = AutocapitalizationType.SENTENCES
    autocorrection: bool = True
    spell_checking: bool = True
    keyboard: KeyboardType = KeyboardType.DEFAULT
    validation_regex: str | None = None
    invalid_message: str | None = None


class BooleanAnswerFormat(BaseModel):
    """Yes/no answer."""

    kind: Literal["boolean"] = "boolean"


class DateAnswerFormat(BaseModel):
    """Calendar date answer."""

    kind: Literal["date"] = "date"


class TextChoiceAnswerFormat(BaseModel):
    """Single choice rendered as a list."""

    kind: Literal["text_choice"] = "text_choice"
    choices: list[TextChoice]


class ValuePickerAnswerFormat(BaseModel):
    """Single choice rendered as a picker wheel."""

    kind: Literal["value_picker"] = "value_picker"
    choices: list[TextChoice]


ImpliedAnswerFormat = DateAnswerFormat | TextChoiceAnswerFormat | ValuePickerAnswerFormat


class CharacteristicAnswerFormat(BaseModel):
    """Answer sourced from a health-profile characteristic."""

    kind: Literal["characteristic"] = "characteristic"
    characteristic: CharacteristicType
    should_request_authorization: bool = True

    def implied(self) -> ImpliedAnswerFormat:
        """Return the format actually rendered for this characteristic.

        Choice characteristics are rendered as a value picker instead of a
        choice list.
        """
        answer_format = self._default_implied()
        if isinstance(answer_format, TextChoiceAnswerFormat):
            return ValuePickerAnswerFormat(choices=answer_format.choices)
        return answer_format

    def _default_implied(self) -> ImpliedAnswerFormat:
        if self.characteristic == CharacteristicType.DATE_OF_BIRTH:
            return DateAnswerFormat()
        return TextChoiceAnswerFormat(choices=CHARACTERISTIC_CHOICES[self.characteristic])


AnswerFormat = Annotated[
    EmailAnswerFormat
    | TextAnswerFormat
    | BooleanAnswerFormat
    | DateAnswerFormat
    | TextChoiceAnswerFormat
    | ValuePickerAnswerFormat
    | CharacteristicAnswerFormat,
    Field(discriminator="kind"),
]
