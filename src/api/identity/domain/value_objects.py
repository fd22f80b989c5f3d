"""Value objects for the Identity domain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

UNKNOWN_NAME = "Unknown User"
UNKNOWN_FIRST_NAME = "Unknown"
UNKNOWN_LAST_NAME = "User"


@dataclass(frozen=True)
class UserProfile:
    """Profile metadata copied from the identity provider.

    Every field is a non-null string; missing provider values are replaced
    by placeholders so the profile can always be displayed.
    """

    name: str
    email: str
    first_name: str
    last_name: str
    photo: str

    @classmethod
    def from_provider_data(cls, data: Mapping[str, Any]) -> UserProfile:
        """Derive a profile from the provider's user object.

        The display name is the username when set, otherwise the trimmed
        first and last name, otherwise a placeholder.
        """
        first_name = data.get("first_name") or ""
        last_name = data.get("last_name") or ""
        name = (
            data.get("username")
            or f"{first_name} {last_name}".strip()
            or UNKNOWN_NAME
        )
        return cls(
            name=name,
            email=_primary_email(data.get("email_addresses")),
            first_name=first_name or UNKNOWN_FIRST_NAME,
            last_name=last_name or UNKNOWN_LAST_NAME,
            photo=data.get("image_url") or "",
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "photo": self.photo,
        }


def _primary_email(addresses: Any) -> str:
    """Return the first address of the provider's email list, or ''."""
    if isinstance(addresses, str) or not isinstance(addresses, Sequence):
        return ""
    if not addresses:
        return ""
    first = addresses[0]
    if isinstance(first, Mapping):
        return first.get("email_address") or ""
    return ""
