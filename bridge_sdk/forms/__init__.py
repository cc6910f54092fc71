"""Profile forms built from declarative survey items.

parse_profile_info reads the requested fields from a survey item;
ProfileFormBuilder expands them into form item descriptors; ProfileForm
ties both together with default options and answer checks.
"""

from bridge_sdk.forms.answer_formats import (
    AnswerFormat,
    AutocapitalizationType,
    BooleanAnswerFormat,
    CharacteristicAnswerFormat,
    CharacteristicType,
    DateAnswerFormat,
    EmailAnswerFormat,
    KeyboardType,
    TextAnswerFormat,
    TextChoice,
    TextChoiceAnswerFormat,
    ValuePickerAnswerFormat,
)
from bridge_sdk.forms.builder import ProfileFormBuilder, form_item_for_identifier, profile_options
from bridge_sdk.forms.form import ProfileForm
from bridge_sdk.forms.models import (
    ExternalIDOptions,
    FormContext,
    FormItemDescriptor,
    ProfileInfoOption,
    ProfileInfoRequest,
    SurveyItem,
    SurveyItemType,
)
from bridge_sdk.forms.parser import parse_profile_info
from bridge_sdk.forms.strings import Localizer, StringTable

__all__ = [
    # Answer formats
    "AnswerFormat",
    "AutocapitalizationType",
    "BooleanAnswerFormat",
    "CharacteristicAnswerFormat",
    "CharacteristicType",
    "DateAnswerFormat",
    "EmailAnswerFormat",
    "KeyboardType",
    "TextAnswerFormat",
    "TextChoice",
    "TextChoiceAnswerFormat",
    "ValuePickerAnswerFormat",
    # Models
    "ExternalIDOptions",
    "FormContext",
    "FormItemDescriptor",
    "ProfileInfoOption",
    "ProfileInfoRequest",
    "SurveyItem",
    "SurveyItemType",
    # Building
    "Localizer",
    "ProfileForm",
    "ProfileFormBuilder",
    "StringTable",
    "form_item_for_identifier",
    "parse_profile_info",
    "profile_options",
]
