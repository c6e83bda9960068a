"""Address entities returned by a lookup and saved to the address book."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class AddressCandidate:
    """One raw entry of a lookup response."""
    id: str
    postcode: str
    street: str
    city: str
    house_number_addition: str = ""


@dataclass(frozen=True)
class ResolvedAddress:
    """A candidate joined with the house number the user searched for."""
    id: str
    postcode: str
    street: str
    city: str
    house_number: str
    house_number_addition: str = ""

    def format(self) -> str:
        number = f"{self.house_number}{self.house_number_addition}"
        return f"{self.street} {number}, {self.postcode} {self.city}"


@dataclass(frozen=True)
class FinishedRecord:
    """A resolved address with the person it belongs to."""
    id: str
    postcode: str
    street: str
    city: str
    house_number: str
    first_name: str
    last_name: str
    house_number_addition: str = ""

    @classmethod
    def from_address(cls, address: ResolvedAddress, first_name: str, last_name: str) -> "FinishedRecord":
        return cls(
            id=address.id,
            postcode=address.postcode,
            street=address.street,
            city=address.city,
            house_number=address.house_number,
            house_number_addition=address.house_number_addition,
            first_name=first_name,
            last_name=last_name,
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FinishedRecord":
        """Build a record from a stored dict. Raises KeyError on missing fields."""
        return cls(
            id=str(data["id"]),
            postcode=str(data["postcode"]),
            street=str(data["street"]),
            city=str(data["city"]),
            house_number=str(data["house_number"]),
            first_name=str(data["first_name"]),
            last_name=str(data["last_name"]),
            house_number_addition=str(data.get("house_number_addition", "")),
        )

    def format(self) -> str:
        number = f"{self.house_number}{self.house_number_addition}"
        return (
            f"{self.first_name} {self.last_name}, "
            f"{self.street} {number}, {self.postcode} {self.city}"
        )


@dataclass(frozen=True)
class WorkflowStatus:
    """Derived view of the workflow: idle, loading or error."""
    state: str
    message: Optional[str] = None

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"

    @classmethod
    def derive(cls, loading: bool, error: Optional[str]) -> "WorkflowStatus":
        if loading:
            return cls(cls.LOADING)
        if error:
            return cls(cls.ERROR, error)
        return cls(cls.IDLE)


def _text(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


def parse_candidate(raw: Mapping[str, Any]) -> AddressCandidate:
    """Copy a raw lookup entry into an AddressCandidate (missing keys become "")."""
    return AddressCandidate(
        id=_text(raw, "id"),
        postcode=_text(raw, "postcode"),
        street=_text(raw, "street"),
        city=_text(raw, "city"),
        house_number_addition=_text(raw, "houseNumberAddition"),
    )


def transform_address(raw: Mapping[str, Any], house_number: str) -> ResolvedAddress:
    """Turn a raw lookup entry into a ResolvedAddress carrying ``house_number``.

    Only ``id``, ``postcode``, ``street``, ``city`` and ``houseNumberAddition``
    are copied; any other keys of the entry (coordinates and the like) are
    dropped, since a saved record has no place for them.
    """
    candidate = parse_candidate(raw)
    return ResolvedAddress(
        id=candidate.id,
        postcode=candidate.postcode,
        street=candidate.street,
        city=candidate.city,
        house_number=house_number,
        house_number_addition=candidate.house_number_addition,
    )
