from typing import Callable, List

from app.database.store import ProfileRecord, StoragePort
from app.modules.users.schemas import UserSearchResult

MIN_QUERY_LENGTH = 2


def profile_matches(profile: ProfileRecord, term: str) -> bool:
    """Case-insensitive substring match on name, email, bio, location and skills.

    ``term`` must already be lower-cased.
    """
    fields = (
        f"{profile.first_name or ''} {profile.last_name or ''}",
        profile.email or "",
        profile.bio or "",
        profile.location or "",
        " ".join(profile.skills),
    )
    return any(term in field.lower() for field in fields)


class SearchService:
    """Naive profile search.

    Scans at most ``scan_limit`` stored profiles (in backend order) and returns
    the first ``result_limit`` matches; there is no ranking and no index.
    """

    def __init__(self, store_provider: Callable[[], StoragePort], scan_limit: int = 100, result_limit: int = 10):
        # Resolved lazily: short queries must not touch the backend at all
        self.store_provider = store_provider
        self.scan_limit = scan_limit
        self.result_limit = result_limit

    def search(self, query: str) -> List[UserSearchResult]:
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return []

        term = query.strip().lower()
        results = []
        for profile in self.store_provider().list_profiles(self.scan_limit):
            if profile_matches(profile, term):
                results.append(UserSearchResult(**profile.model_dump(include=set(UserSearchResult.model_fields))))
                if len(results) >= self.result_limit:
                    break
        return results
