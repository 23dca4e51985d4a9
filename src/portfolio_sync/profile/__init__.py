"""Profile provider client."""

from portfolio_sync.profile.client import ProfileClient, ProfileFetchError

__all__ = ["ProfileClient", "ProfileFetchError"]
