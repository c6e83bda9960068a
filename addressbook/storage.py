import json
from pathlib import Path
from typing import Dict, Any, List

from .logger import get_logger
from .models import FinishedRecord


def load_book(path: Path) -> Dict[str, Any]:
    """Read the book at ``path``. Missing, empty or unreadable files load as empty."""
    if not path.exists():
        return {"addresses": []}
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return {"addresses": []}
            data = json.loads(content)
    except (ValueError, OSError) as e:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        get_logger().warning("Unreadable address book, using an empty one", store=str(path), error=str(e))
        return {"addresses": []}
    if not isinstance(data, dict) or not isinstance(data.get("addresses"), list):
        get_logger().warning("Address book has no addresses list, using an empty one", store=str(path))
        return {"addresses": []}
    return data


def save_book(path: Path, book: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(book, f, indent=2, ensure_ascii=False)


class AddressBook:
    """JSON-file address book. The workflow only ever calls ``add_address``."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.logger = get_logger()

    def add_address(self, record: FinishedRecord) -> None:
        book = load_book(self.path)
        book["addresses"].append(record.to_dict())
        save_book(self.path, book)
        self.logger.info("Address saved", id=record.id, store=str(self.path))

    def list_addresses(self) -> List[FinishedRecord]:
        """Stored records, skipping entries that are missing fields."""
        records = []
        for item in load_book(self.path)["addresses"]:
            try:
                records.append(FinishedRecord.from_dict(item))
            except (KeyError, TypeError, AttributeError):
                self.logger.warning("Skipping malformed address entry", entry=item)
        return records

    def remove_address(self, record_id: str) -> bool:
        """Remove every entry with ``record_id``. Returns True if any was removed."""
        book = load_book(self.path)
        kept = [a for a in book["addresses"] if not (isinstance(a, dict) and a.get("id") == record_id)]
        if len(kept) == len(book["addresses"]):
            return False
        book["addresses"] = kept
        save_book(self.path, book)
        self.logger.info("Address removed", id=record_id, store=str(self.path))
        return True

    def clear(self) -> None:
        save_book(self.path, {"addresses": []})
