"""Tests for expanding profile requests into form items."""

import pytest

from bridge_sdk.config import SDKConfig
from bridge_sdk.forms import (
    AutocapitalizationType,
    BooleanAnswerFormat,
    CharacteristicAnswerFormat,
    CharacteristicType,
    EmailAnswerFormat,
    ExternalIDOptions,
    FormContext,
    KeyboardType,
    ProfileFormBuilder,
    ProfileInfoOption,
    ProfileInfoRequest,
    StringTable,
    TextAnswerFormat,
    form_item_for_identifier,
    profile_options,
)

REGISTRATION = FormContext(is_registration_flow=True)


@pytest.fixture
def builder() -> ProfileFormBuilder:
    """Create a builder with default configuration."""
    return ProfileFormBuilder()


def expand(builder: ProfileFormBuilder, *options: ProfileInfoOption, context=None):
    return builder.expand(ProfileInfoRequest.from_includes(list(options)), context)


class TestExpand:
    """Tests for ProfileFormBuilder.expand()."""

    def test_order_and_identifiers(self, builder: ProfileFormBuilder) -> None:
        """Test that descriptors follow request order and use option names."""
        items = expand(builder, *ProfileInfoOption)

        assert [item.identifier for item in items] == [option.value for option in ProfileInfoOption]
        assert all(item.required for item in items)

    def test_empty_request(self, builder: ProfileFormBuilder) -> None:
        """Test that an empty request yields no items."""
        assert expand(builder) == []

    def test_email(self, builder: ProfileFormBuilder) -> None:
        """Test the email descriptor."""
        [item] = expand(builder, ProfileInfoOption.EMAIL)

        assert isinstance(item.answer_format, EmailAnswerFormat)
        assert item.text == "Email"
        assert item.placeholder == "jappleseed@example.com"
        assert item.optional is False

    def test_name(self, builder: ProfileFormBuilder) -> None:
        """Test the name descriptor's keyboard settings."""
        [item] = expand(builder, ProfileInfoOption.NAME)

        answer_format = item.answer_format
        assert isinstance(answer_format, TextAnswerFormat)
        assert answer_format.multiple_lines is False
        assert answer_format.autocapitalization == AutocapitalizationType.WORDS
        assert answer_format.autocorrection is False
        assert answer_format.spell_checking is False
        assert answer_format.keyboard == KeyboardType.DEFAULT

    def test_external_id_uses_request_options(self, builder: ProfileFormBuilder) -> None:
        """Test that the external ID keyboard comes from the request."""
        request = ProfileInfoRequest.for_external_id(
            ExternalIDOptions(
                autocapitalization=AutocapitalizationType.WORDS,
                keyboard=KeyboardType.NUMBER_PAD,
            )
        )
        [item] = builder.expand(request)

        assert item.identifier == "externalID"
        assert item.answer_format.autocapitalization == AutocapitalizationType.WORDS
        assert item.answer_format.keyboard == KeyboardType.NUMBER_PAD
        assert item.answer_format.autocorrection is False
        assert item.answer_format.spell_checking is False

    @pytest.mark.parametrize(
        ("option", "characteristic"),
        [
            (ProfileInfoOption.BIRTHDATE, CharacteristicType.DATE_OF_BIRTH),
            (ProfileInfoOption.GENDER, CharacteristicType.BIOLOGICAL_SEX),
            (ProfileInfoOption.BLOOD_TYPE, CharacteristicType.BLOOD_TYPE),
            (ProfileInfoOption.FITZPATRICK_SKIN_TYPE, CharacteristicType.FITZPATRICK_SKIN_TYPE),
        ],
    )
    def test_characteristic_items(
        self,
        builder: ProfileFormBuilder,
        option: ProfileInfoOption,
        characteristic: CharacteristicType,
    ) -> None:
        """Test that characteristic items never request authorization."""
        [item] = expand(builder, option)

        assert isinstance(item.answer_format, CharacteristicAnswerFormat)
        assert item.answer_format.characteristic == characteristic
        assert item.answer_format.should_request_authorization is False
        assert item.placeholder is not None

    def test_wheelchair_use_is_boolean(self, builder: ProfileFormBuilder) -> None:
        """Test that wheelchair use is a plain yes/no question."""
        [item] = expand(builder, ProfileInfoOption.WHEELCHAIR_USE)

        assert isinstance(item.answer_format, BooleanAnswerFormat)
        assert item.placeholder is None

    def test_custom_localizer(self) -> None:
        """Test that prompts come from the localizer."""
        builder = ProfileFormBuilder(localizer=StringTable({"EMAIL_FORM_ITEM_TITLE": "Courriel"}))
        [item] = expand(builder, ProfileInfoOption.EMAIL)

        assert item.text == "Courriel"


class TestPassword:
    """Tests for password and confirmation descriptors."""

    def test_login_has_single_item(self, builder: ProfileFormBuilder) -> None:
        """Test that a non-registration flow has no confirmation."""
        items = expand(builder, ProfileInfoOption.PASSWORD)

        assert len(items) == 1
        answer_format = items[0].answer_format
        assert answer_format.secure_text_entry is True
        assert answer_format.multiple_lines is False
        assert answer_format.autocapitalization == AutocapitalizationType.NONE
        assert answer_format.autocorrection is False
        assert answer_format.spell_checking is False
        assert answer_format.validation_regex is None

    def test_registration_adds_confirmation(self, builder: ProfileFormBuilder) -> None:
        """Test that registration yields password plus confirmation."""
        items = expand(builder, ProfileInfoOption.PASSWORD, context=REGISTRATION)

        assert [item.identifier for item in items] == ["password", "confirmation"]
        password, confirmation = items
        assert password.validation_regex == "[[:ascii:]]{2,24}"
        assert confirmation.validation_regex == password.validation_regex
        assert confirmation.confirmation_of == "password"
        assert confirmation.confirmation_error == "Passwords do not match"
        assert confirmation.answer_format.secure_text_entry is True
        assert password.answer_format.invalid_message == "Passwords must be 2 to 24 characters long"

    def test_configured_bounds(self) -> None:
        """Test that password bounds and confirmation identifier follow the config."""
        builder = ProfileFormBuilder(
            config=SDKConfig(
                password_min_length=8,
                password_max_length=64,
                confirmation_identifier="passwordConfirm",
            )
        )
        items = expand(builder, ProfileInfoOption.EMAIL, ProfileInfoOption.PASSWORD, context=REGISTRATION)

        assert [item.identifier for item in items] == ["email", "password", "passwordConfirm"]
        assert items[2].validation_regex == "[[:ascii:]]{8,64}"

    def test_confirmation_follows_password_position(self, builder: ProfileFormBuilder) -> None:
        """Test that the confirmation directly follows the password."""
        items = expand(
            builder,
            ProfileInfoOption.PASSWORD,
            ProfileInfoOption.NAME,
            context=REGISTRATION,
        )
        assert [item.identifier for item in items] == ["password", "confirmation", "name"]


class TestHelpers:
    """Tests for the descriptor list helpers."""

    def test_form_item_for_identifier(self, builder: ProfileFormBuilder) -> None:
        """Test lookup by identifier."""
        items = expand(builder, ProfileInfoOption.EMAIL, ProfileInfoOption.PASSWORD, context=REGISTRATION)

        assert form_item_for_identifier(items, "confirmation").confirmation_of == "password"
        assert form_item_for_identifier(items, "name") is None
        assert form_item_for_identifier(None, "email") is None

    def test_profile_options_skips_confirmation(self, builder: ProfileFormBuilder) -> None:
        """Test that only profile options are reported."""
        items = expand(builder, ProfileInfoOption.PASSWORD, ProfileInfoOption.EMAIL, context=REGISTRATION)

        assert profile_options(items) == [ProfileInfoOption.PASSWORD, ProfileInfoOption.EMAIL]
