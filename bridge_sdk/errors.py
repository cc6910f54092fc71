"""Exception hierarchy for bridge_sdk.

Archive and form failures are local to a single build/parse call. The
public entry points turn them into a None result; the strict variants
let them propagate.
"""


class BridgeSDKError(Exception):
    """Base class for all bridge_sdk errors."""

    pass


class ConfigError(BridgeSDKError):
    """Raised when an SDK configuration file cannot be loaded."""

    pass


class ArchiveError(BridgeSDKError):
    """Base class for failures while building an upload archive."""

    code = "ARCHIVE_ERROR"


class EmptyResultError(ArchiveError):
    """Raised when an activity result has no step results."""

    code = "EMPTY_RESULT"

    def __init__(self, activity_identifier: str) -> None:
        self.activity_identifier = activity_identifier
        super().__init__(f"Activity result {activity_identifier!r} has no step results to archive")


class UnsupportedResultTypeError(ArchiveError):
    """Raised when a result item cannot be mapped to an archivable payload."""

    code = "UNSUPPORTED_RESULT_TYPE"

    def __init__(
        self,
        type_name: str,
        item_identifier: str | None,
        step_identifier: str,
        activity_identifier: str | None = None,
    ) -> None:
        self.type_name = type_name
        self.item_identifier = item_identifier
        self.step_identifier = step_identifier
        self.activity_identifier = activity_identifier
        super().__init__(
            f"Unsupported archivable result type {type_name!r} "
            f"(result {item_identifier!r} of step {step_identifier!r}"
            f" of activity result {activity_identifier!r})"
        )


class EmptyArchiveError(ArchiveError):
    """Raised when every conversion succeeded but nothing was archived."""

    code = "EMPTY_ARCHIVE"

    def __init__(self, activity_identifier: str) -> None:
        self.activity_identifier = activity_identifier
        super().__init__(f"Activity result {activity_identifier!r} produced no archivable files")


class ArchiveValidationError(ArchiveError):
    """Raised when a structured record fails its JSON schema."""

    code = "RECORD_VALIDATION_FAILED"

    def __init__(self, filename: str, message: str) -> None:
        self.filename = filename
        super().__init__(f"Record {filename!r} failed validation: {message}")


class DuplicateArtifactError(ArchiveError):
    """Raised when two artifacts in one bundle share a filename."""

    code = "DUPLICATE_FILENAME"

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"Archive already contains a file named {filename!r}")


class InvalidArtifactFilenameError(ArchiveError):
    """Raised when an artifact filename would escape the archive root."""

    code = "INVALID_FILENAME"

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(
            f"Artifact filename {filename!r} must be a plain name without path separators"
        )


class ArchivePersistError(ArchiveError):
    """Raised when a bundle cannot be written to disk."""

    code = "PERSIST_FAILED"


class ProfileFormError(BridgeSDKError):
    """Base class for profile form errors."""

    pass


class MalformedSurveyItemError(ProfileFormError):
    """Raised when a survey item is not a form with an item list."""

    pass


class MissingRequiredOptionsError(ProfileFormError):
    """Raised when required profile answers are absent."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required profile answers: {missing}")


class MissingEmailError(MissingRequiredOptionsError):
    """Raised when the email answer is absent."""

    def __init__(self) -> None:
        super().__init__(["email"])


class MissingExternalIDError(MissingRequiredOptionsError):
    """Raised when the external ID answer is absent."""

    def __init__(self) -> None:
        super().__init__(["externalID"])


class MissingNameError(MissingRequiredOptionsError):
    """Raised when the name answer is absent."""

    def __init__(self) -> None:
        super().__init__(["name"])


class NotConsentedError(ProfileFormError):
    """Raised when profile data is submitted without consent."""

    pass


class InvalidAnswerError(ProfileFormError):
    """Raised when an answer does not satisfy its form item's validation rule."""

    def __init__(self, identifier: str, message: str) -> None:
        self.identifier = identifier
        super().__init__(message)


class ConfirmationMismatchError(ProfileFormError):
    """Raised when a confirmation answer differs from the value it confirms."""

    def __init__(self, identifier: str, message: str) -> None:
        self.identifier = identifier
        super().__init__(message)
