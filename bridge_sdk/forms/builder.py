"""Builder that expands a ProfileInfoRequest into form item descriptors.

Each requested option maps to one descriptor, except a password in a
registration flow, which is followed by a confirmation descriptor.
"""

import logging

from bridge_sdk.config import SDKConfig, get_default_config
from bridge_sdk.forms.answer_formats import (
    AutocapitalizationType,
    BooleanAnswerFormat,
    CharacteristicAnswerFormat,
    CharacteristicType,
    EmailAnswerFormat,
    KeyboardType,
    TextAnswerFormat,
)
from bridge_sdk.forms.models import (
    ExternalIDOptions,
    FormContext,
    FormItemDescriptor,
    ProfileInfoOption,
    ProfileInfoRequest,
)
from bridge_sdk.forms.strings import Localizer, StringTable, localized_format

logger = logging.getLogger(__name__)

CHARACTERISTIC_OPTIONS: dict[ProfileInfoOption, tuple[CharacteristicType, str]] = {
    ProfileInfoOption.BIRTHDATE: (CharacteristicType.DATE_OF_BIRTH, "DOB"),
    ProfileInfoOption.GENDER: (CharacteristicType.BIOLOGICAL_SEX, "GENDER"),
    ProfileInfoOption.BLOOD_TYPE: (CharacteristicType.BLOOD_TYPE, "BLOOD_TYPE"),
    ProfileInfoOption.FITZPATRICK_SKIN_TYPE: (
        CharacteristicType.FITZPATRICK_SKIN_TYPE,
        "FITZPATRICK_SKIN_TYPE",
    ),
}


class ProfileFormBuilder:
    """Builds form item descriptors for requested profile fields."""

    def __init__(
        self,
        config: SDKConfig | None = None,
        localizer: Localizer | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            config: SDK configuration (password bounds, confirmation identifier).
            localizer: String lookup for prompts. Defaults to the English StringTable.
        """
        self.config = config or get_default_config()
        self.localizer = localizer or StringTable()

    def expand(
        self,
        request: ProfileInfoRequest,
        context: FormContext | None = None,
    ) -> list[FormItemDescriptor]:
        """Expand a request into descriptors, in request order.

        Args:
            request: The parsed profile request.
            context: Form context. Defaults to a non-registration flow.

        Returns:
            List of FormItemDescriptor.
        """
        context = context or FormContext()
        form_items: list[FormItemDescriptor] = []

        for option in request.includes:
            if option == ProfileInfoOption.EMAIL:
                form_items.append(self.make_email_item(option))
            elif option == ProfileInfoOption.PASSWORD:
                password_item = self.make_password_item(option)
                if context.is_registration_flow:
                    password_item, confirm_item = self.make_confirmation_items(password_item)
                    form_items.extend([password_item, confirm_item])
                else:
                    form_items.append(password_item)
            elif option == ProfileInfoOption.EXTERNAL_ID:
                form_items.append(self.make_external_id_item(option, request.external_id_options))
            elif option == ProfileInfoOption.NAME:
                form_items.append(self.make_name_item(option))
            elif option in CHARACTERISTIC_OPTIONS:
                form_items.append(self.make_characteristic_item(option))
            elif option == ProfileInfoOption.WHEELCHAIR_USE:
                form_items.append(self.make_wheelchair_use_item(option))

        logger.debug(
            "Expanded %d profile options into %d form items", len(request.includes), len(form_items)
        )
        return form_items

    def make_email_item(self, option: ProfileInfoOption) -> FormItemDescriptor:
        return FormItemDescriptor(
            identifier=option.value,
            text=self._string("EMAIL_FORM_ITEM_TITLE"),
            placeholder=self._string("EMAIL_FORM_ITEM_PLACEHOLDER"),
            answer_format=EmailAnswerFormat(),
        )

    def make_password_item(self, option: ProfileInfoOption) -> FormItemDescriptor:
        answer_format = TextAnswerFormat(
            multiple_lines=False,
            secure_text_entry=True,
            autocapitalization=AutocapitalizationType.NONE,
            autocorrection=False,
            spell_checking=False,
        )
        return FormItemDescriptor(
            identifier=option.value,
            text=self._string("PASSWORD_FORM_ITEM_TITLE"),
            placeholder=self._string("PASSWORD_FORM_ITEM_PLACEHOLDER"),
            answer_format=answer_format,
        )

    def make_confirmation_items(
        self,
        password_item: FormItemDescriptor,
    ) -> tuple[FormItemDescriptor, FormItemDescriptor]:
        """Add length validation to a password item and build its confirmation.

        Both items share the same validation regex.
        """
        min_length = self.config.password_min_length
        max_length = self.config.password_max_length
        answer_format = password_item.answer_format.model_copy(
            update={
                "validation_regex": self.config.password_regex,
                "invalid_message": localized_format(
                    self.localizer, "INVALID_PASSWORD_LENGTH", min_length, max_length
                ),
            }
        )
        password_item = password_item.model_copy(update={"answer_format": answer_format})

        confirm_item = FormItemDescriptor(
            identifier=self.config.confirmation_identifier,
            text=self._string("CONFIRM_PASSWORD_FORM_ITEM_TITLE"),
            placeholder=self._string("CONFIRM_PASSWORD_FORM_ITEM_PLACEHOLDER"),
            answer_format=answer_format.model_copy(),
            optional=password_item.optional,
            confirmation_of=password_item.identifier,
            confirmation_error=self._string("CONFIRM_PASSWORD_ERROR_MESSAGE"),
        )
        return password_item, confirm_item

    def make_external_id_item(
        self,
        option: ProfileInfoOption,
        external_id_options: ExternalIDOptions,
    ) -> FormItemDescriptor:
        answer_format = TextAnswerFormat(
            multiple_lines=False,
            autocapitalization=external_id_options.autocapitalization,
            autocorrection=False,
            spell_checking=False,
            keyboard=external_id_options.keyboard,
        )
        return FormItemDescriptor(
            identifier=option.value,
            text=self._string("EXTERNAL_ID_FORM_ITEM_TITLE"),
            placeholder=self._string("EXTERNAL_ID_FORM_ITEM_PLACEHOLDER"),
            answer_format=answer_format,
        )

    def make_name_item(self, option: ProfileInfoOption) -> FormItemDescriptor:
        answer_format = TextAnswerFormat(
            multiple_lines=False,
            autocapitalization=AutocapitalizationType.WORDS,
            autocorrection=False,
            spell_checking=False,
            keyboard=KeyboardType.DEFAULT,
        )
        return FormItemDescriptor(
            identifier=option.value,
            text=self._string("NAME_FORM_ITEM_TITLE"),
            placeholder=self._string("NAME_FORM_ITEM_PLACEHOLDER"),
            answer_format=answer_format,
        )

    def make_characteristic_item(self, option: ProfileInfoOption) -> FormItemDescriptor:
        """Build a characteristic-backed item without prompting for authorization."""
        characteristic, string_prefix = CHARACTERISTIC_OPTIONS[option]
        return FormItemDescriptor(
            identifier=option.value,
            text=self._string(f"{string_prefix}_FORM_ITEM_TITLE"),
            placeholder=self._string(f"{string_prefix}_FORM_ITEM_PLACEHOLDER"),
            answer_format=CharacteristicAnswerFormat(
                characteristic=characteristic,
                should_request_authorization=False,
            ),
        )

    def make_wheelchair_use_item(self, option: ProfileInfoOption) -> FormItemDescriptor:
        # characteristic-backed wheelchair use is disabled; asked as a plain yes/no
        return FormItemDescriptor(
            identifier=option.value,
            text=self._string("WHEELCHAIR_USE_FORM_ITEM_TITLE"),
            answer_format=BooleanAnswerFormat(),
        )

    def _string(self, key: str) -> str:
        return self.localizer.localized_string(key)


def form_item_for_identifier(
    form_items: list[FormItemDescriptor] | None,
    identifier: str,
) -> FormItemDescriptor | None:
    """Find a form item by identifier."""
    for item in form_items or []:
        if item.identifier == identifier:
            return item
    return None


def profile_options(form_items: list[FormItemDescriptor] | None) -> list[ProfileInfoOption]:
    """Profile options present in a list of form items, in order."""
    options = []
    for item in form_items or []:
        option = ProfileInfoOption.from_name(item.identifier)
        if option is not None:
            options.append(option)
    return options
