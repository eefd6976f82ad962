"""Benefit and claim DTOs plus the derived benefit views."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Mapping, Optional

STATUS_ACTIVE = "active"
STATUS_PAUSED = "paused"
STATUS_EXPIRED = "expired"
STATUS_DELETED = "deleted"

KNOWN_STATUSES = (STATUS_ACTIVE, STATUS_PAUSED, STATUS_EXPIRED, STATUS_DELETED)
EXPIRED_STATUSES = frozenset({STATUS_EXPIRED, STATUS_DELETED})


class ErrorCode(IntEnum):
    """Envelope codes the API answers with."""

    SUCCESS = 0
    UNKNOWN_ERROR = 1
    INVALID_INPUT = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    SERVER_ERROR = 500

    AUTH_PROVIDER_NOT_FOUND = 1000
    AUTH_CODE_MISSING = 1001
    AUTH_FAILED = 1002
    AUTH_USER_BANNED = 1003
    AUTH_INVALID_TOKEN = 1004
    AUTH_EXPIRED_TOKEN = 1005

    BENEFIT_CREATION_FAILED = 2000
    BENEFIT_NOT_FOUND = 2001
    BENEFIT_EXPIRED = 2002
    BENEFIT_DEPLETED = 2003
    BENEFIT_NOT_ACTIVE = 2004
    BENEFIT_ALREADY_CLAIMED = 2005
    BENEFIT_INELIGIBLE = 2006


@dataclass
class Benefit:
    """A benefit as the server reports it. Only ``uuid`` and ``status`` are interpreted."""

    uuid: str
    status: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Benefit":
        return cls(
            uuid=data.get("uuid", ""),
            status=data.get("status", ""),
            payload={k: v for k, v in data.items() if k not in ("uuid", "status")},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"uuid": self.uuid, "status": self.status, **self.payload}

    @property
    def title(self) -> str:
        return self.payload.get("title") or ""

    @property
    def description(self) -> str:
        return self.payload.get("description") or ""

    @property
    def total_count(self) -> int:
        return self.payload.get("total_count") or 0

    @property
    def claimed_count(self) -> int:
        return self.payload.get("claimed_count") or 0


@dataclass(frozen=True)
class Claim:
    id: Any = None
    claimed_at: Optional[str] = None
    oauth_provider: Optional[str] = None
    code: Optional[str] = None
    benefit: Optional[Dict[str, Any]] = None
    user: Optional[Dict[str, Any]] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Claim":
        return cls(
            id=data.get("id"),
            claimed_at=data.get("claimed_at"),
            oauth_provider=data.get("oauth_provider"),
            code=data.get("code"),
            benefit=data.get("benefit"),
            user=data.get("user"),
            payload=dict(data),
        )

    @property
    def benefit_uuid(self) -> Optional[str]:
        return (self.benefit or {}).get("uuid")


@dataclass(frozen=True)
class BenefitDraft:
    """Input for creating a benefit."""

    title: str
    codes: List[str]
    description: str = ""
    expires_at: Optional[str] = None
    allowed_providers: List[str] = field(default_factory=list)
    min_account_age: int = 0
    claim_conditions: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        title = self.title.strip()
        if not title:
            raise ValueError("Title is required")
        codes = [c.strip() for c in self.codes if c and c.strip()]
        if not codes:
            raise ValueError("At least one redemption code is required")

        payload: Dict[str, Any] = {
            "title": title,
            "description": self.description,
            "codes": codes,
            "allowed_providers": list(self.allowed_providers),
            "min_account_age": self.min_account_age,
            "claim_conditions": dict(self.claim_conditions),
        }
        if self.expires_at:
            payload["expires_at"] = self.expires_at
        return payload


def active_benefits(benefits: Iterable[Benefit]) -> List[Benefit]:
    return [b for b in benefits if b.status == STATUS_ACTIVE]


def expired_benefits(benefits: Iterable[Benefit]) -> List[Benefit]:
    return [b for b in benefits if b.status in EXPIRED_STATUSES]
