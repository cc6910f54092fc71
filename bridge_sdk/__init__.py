"""bridge_sdk: Upload archives and profile forms for research-study apps."""

__version__ = "0.1.0"

from bridge_sdk.archive import ArchiveBuilder, ArchiveBundle, ResultAdapter
from bridge_sdk.forms import ProfileForm, ProfileFormBuilder, parse_profile_info

__all__ = [
    "__version__",
    "ArchiveBuilder",
    "ArchiveBundle",
    "ProfileForm",
    "ProfileFormBuilder",
    "ResultAdapter",
    "parse_profile_info",
]
