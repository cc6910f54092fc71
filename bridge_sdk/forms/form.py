"""Profile forms built from survey items.

A ProfileForm parses a survey item into form items, falling back to the
default fields for its survey item type, and checks a set of answers
against those items.
"""

import logging
from collections.abc import Mapping
from typing import Any

from bridge_sdk.errors import (
    ConfirmationMismatchError,
    MissingEmailError,
    MissingExternalIDError,
    MissingNameError,
    MissingRequiredOptionsError,
    NotConsentedError,
)
from bridge_sdk.forms.builder import ProfileFormBuilder, form_item_for_identifier, profile_options
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

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS: dict[SurveyItemType, list[ProfileInfoOption]] = {
    SurveyItemType.REGISTRATION: [ProfileInfoOption.EMAIL, ProfileInfoOption.PASSWORD],
    SurveyItemType.LOGIN: [ProfileInfoOption.EMAIL, ProfileInfoOption.PASSWORD],
    SurveyItemType.EXTERNAL_ID: [ProfileInfoOption.EXTERNAL_ID],
    SurveyItemType.PROFILE: [ProfileInfoOption.NAME, ProfileInfoOption.BIRTHDATE],
}

MISSING_OPTION_ERRORS = {
    ProfileInfoOption.EMAIL.value: MissingEmailError,
    ProfileInfoOption.EXTERNAL_ID.value: MissingExternalIDError,
    ProfileInfoOption.NAME.value: MissingNameError,
}


class ProfileForm:
    """A form step asking for profile information."""

    def __init__(
        self,
        identifier: str,
        survey_item_type: SurveyItemType = SurveyItemType.PROFILE,
        title: str | None = None,
        text: str | None = None,
        footnote: str | None = None,
        form_items: list[FormItemDescriptor] | None = None,
    ) -> None:
        self.identifier = identifier
        self.survey_item_type = survey_item_type
        self.title = title
        self.text = text
        self.footnote = footnote
        self.form_items = form_items
        self.custom_options: list[Any] = []

    @classmethod
    def from_survey_item(
        cls,
        survey_item: SurveyItem | Mapping[str, Any],
        survey_item_type: SurveyItemType | None = None,
        builder: ProfileFormBuilder | None = None,
    ) -> "ProfileForm":
        """Create a form from a survey item.

        If the survey item does not list any form items, the default options
        for the survey item type are used instead.

        Args:
            survey_item: The survey item (model or JSON-like mapping).
            survey_item_type: Type of the form. Read from the item's `type` if omitted.
            builder: Builder used to expand the options.
        """
        builder = builder or ProfileFormBuilder()
        fields = survey_item.model_dump() if isinstance(survey_item, SurveyItem) else dict(survey_item)
        if survey_item_type is None:
            survey_item_type = _survey_item_type(fields.get("type"))

        form = cls(
            identifier=fields.get("identifier", survey_item_type.value),
            survey_item_type=survey_item_type,
            title=fields.get("title"),
            text=fields.get("text"),
            footnote=fields.get("footnote"),
        )

        request = parse_profile_info(survey_item, config=builder.config)
        if request is None:
            logger.debug("Using default options for %s", form.identifier)
            request = ProfileInfoRequest(
                includes=form.default_options(survey_item),
                external_id_options=ExternalIDOptions.from_config(builder.config),
            )

        form.custom_options = request.custom_options
        form.form_items = builder.expand(
            request, FormContext.for_survey_item_type(survey_item_type)
        )
        return form

    def default_options(
        self,
        survey_item: SurveyItem | Mapping[str, Any] | None = None,
    ) -> list[ProfileInfoOption]:
        """Options used when the survey item lists none."""
        return list(DEFAULT_OPTIONS[self.survey_item_type])

    @property
    def options(self) -> list[ProfileInfoOption] | None:
        """Profile options present in this form, or None if it has no items."""
        if self.form_items is None:
            return None
        return profile_options(self.form_items)

    def form_item_for_identifier(self, identifier: str) -> FormItemDescriptor | None:
        return form_item_for_identifier(self.form_items, identifier)

    def form_item_for_option(self, option: ProfileInfoOption) -> FormItemDescriptor | None:
        return form_item_for_identifier(self.form_items, option.value)

    def validate_answers(self, answers: Mapping[str, Any], consented: bool = True) -> None:
        """Check a set of answers against this form.

        Args:
            answers: Mapping of form item identifier to answer.
            consented: Whether the participant has consented.

        Raises:
            NotConsentedError: If consented is False.
            MissingRequiredOptionsError: If required answers are absent. The
                email, externalID and name fields have dedicated subclasses when
                they are the only missing answer.
            InvalidAnswerError: If an answer fails its validation rule.
            ConfirmationMismatchError: If a confirmation does not match.
        """
        if not consented:
            raise NotConsentedError(f"Cannot submit {self.identifier!r} without consent")

        form_items = self.form_items or []
        missing = [
            item.identifier
            for item in form_items
            if item.required and answers.get(item.identifier) in (None, "")
        ]
        if len(missing) == 1 and missing[0] in MISSING_OPTION_ERRORS:
            raise MISSING_OPTION_ERRORS[missing[0]]()
        if missing:
            raise MissingRequiredOptionsError(missing)

        for item in form_items:
            if item.identifier in answers:
                item.validate_answer(answers[item.identifier])

            if item.confirmation_of is not None:
                if answers.get(item.identifier) != answers.get(item.confirmation_of):
                    raise ConfirmationMismatchError(
                        item.identifier,
                        item.confirmation_error or f"{item.identifier!r} does not match",
                    )


def _survey_item_type(value: Any) -> SurveyItemType:
    try:
        return SurveyItemType(value)
    except ValueError:
        return SurveyItemType.PROFILE
