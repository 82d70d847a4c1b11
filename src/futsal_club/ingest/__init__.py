"""Input adapters that turn notices and roster exports into profiles."""

from .attendance import ParsedSession, RosterMatch, match_attendees, parse_session_text
from .profiles import (
    DEFAULT_PROFILE_MAPPING,
    ProfileRow,
    load_profile_csv,
    load_profiles_from_csv,
    rows_to_profiles,
)

__all__ = [
    "DEFAULT_PROFILE_MAPPING",
    "ParsedSession",
    "ProfileRow",
    "RosterMatch",
    "load_profile_csv",
    "load_profiles_from_csv",
    "match_attendees",
    "parse_session_text",
    "rows_to_profiles",
]
