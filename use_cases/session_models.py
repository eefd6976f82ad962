"""Session DTOs shared across application layers."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class Provider:
    id: str
    display_name: str
    auth_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Provider":
        provider_id = data.get("name") or data.get("id") or ""
        return cls(
            id=provider_id,
            display_name=data.get("display_name") or provider_id,
            auth_url=data.get("auth_url"),
        )


@dataclass(frozen=True)
class UserProfile:
    id: Any
    name: str
    avatar_url: Optional[str] = None
    accounts: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "UserProfile":
        return cls(
            id=data.get("id"),
            name=data.get("username") or data.get("name") or "",
            avatar_url=data.get("avatar_url"),
            accounts=list(data.get("accounts") or []),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw) if self.raw else {"id": self.id, "name": self.name, "avatar_url": self.avatar_url}

    @property
    def providers(self) -> List[str]:
        """Provider names of the linked OAuth accounts."""
        return [a.get("provider") for a in self.accounts if a.get("provider")]
