from .store import UserProfile, UserStore

__all__ = ["UserProfile", "UserStore"]
