"""Parser for profile-info survey items.

Reads the item list of a form survey step and classifies each entry as a
known profile option (bare name or record with an `identifier`) or a
custom entry that is passed through untouched.
"""

import logging
from collections.abc import Mapping
from typing import Any

import jsonschema

from bridge_sdk.config import SDKConfig, get_default_config
from bridge_sdk.errors import MalformedSurveyItemError
from bridge_sdk.forms.models import (
    ExternalIDOptions,
    ProfileInfoOption,
    ProfileInfoRequest,
    SurveyItem,
)

logger = logging.getLogger(__name__)

SURVEY_ITEM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["items"],
    "properties": {
        "identifier": {"type": "string"},
        "type": {"type": "string"},
        "title": {"type": ["string", "null"]},
        "text": {"type": ["string", "null"]},
        "footnote": {"type": ["string", "null"]},
        "items": {"type": "array", "minItems": 1},
    },
}


def parse_profile_info(
    survey_item: SurveyItem | Mapping[str, Any] | None,
    config: SDKConfig | None = None,
    strict: bool = False,
) -> ProfileInfoRequest | None:
    """Parse the profile fields requested by a survey item.

    Args:
        survey_item: A SurveyItem or its JSON-like mapping.
        config: SDK configuration supplying the external ID defaults.
        strict: If True, raise instead of returning None.

    Returns:
        The ProfileInfoRequest, or None if the item is not a form with items.

    Raises:
        MalformedSurveyItemError: If strict=True and the item has no form items.
    """
    try:
        items = _form_items(survey_item)
    except MalformedSurveyItemError as e:
        if strict:
            raise
        logger.warning("Ignoring survey item: %s", e)
        return None

    config = config or get_default_config()
    includes: list[ProfileInfoOption] = []
    external_id_options = ExternalIDOptions.from_config(config)
    custom_options: list[Any] = []

    for entry in items:
        option = None
        overrides = None
        if isinstance(entry, str):
            option = ProfileInfoOption.from_name(entry)
        elif isinstance(entry, Mapping):
            option = ProfileInfoOption.from_name(entry.get("identifier"))
            overrides = entry

        if option is None:
            custom_options.append(entry)
            continue

        # first occurrence wins
        if option in includes:
            logger.debug("Skipping duplicate profile option %s", option.value)
            continue

        includes.append(option)
        if option == ProfileInfoOption.EXTERNAL_ID and overrides is not None:
            external_id_options = ExternalIDOptions.from_override(dict(overrides))

    return ProfileInfoRequest(
        includes=includes,
        external_id_options=external_id_options,
        custom_options=custom_options,
    )


def _form_items(survey_item: SurveyItem | Mapping[str, Any] | None) -> list[Any]:
    """Return the item list of a form-shaped survey item."""
    if isinstance(survey_item, SurveyItem):
        survey_item = survey_item.model_dump(exclude_none=True)

    if not isinstance(survey_item, Mapping):
        raise MalformedSurveyItemError(
            f"Expected a form survey item, got {type(survey_item).__name__}"
        )

    try:
        jsonschema.validate(dict(survey_item), SURVEY_ITEM_SCHEMA)
    except jsonschema.ValidationError as e:
        raise MalformedSurveyItemError(
            f"Survey item {survey_item.get('identifier')!r} has no form items: {e.message}"
        ) from e

    return list(survey_item["items"])
