# app/client/storage.py
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from app.client.items import LocalCartItem

logger = logging.getLogger(__name__)

# Serialized slots above this size are still written, but logged
LARGE_SLOT_CHARS = 5_000_000


class LocalStorage:
    """
    Minimal browser-style ``localStorage``: string values under string keys,
    kept in a single JSON file.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Unreadable local storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self.path)

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class LocalCartStorage:
    """
    The single local storage slot holding the serialized array of local
    custom-design cart lines.

    Only the cart store reads or writes this slot.
    """

    def __init__(self, storage: LocalStorage, key: str = "shafe_cart"):
        self.storage = storage
        self.key = key

    def load(self) -> list[LocalCartItem]:
        """
        Return the stored lines.

        A corrupt slot is removed and treated as empty; individual entries
        that fail validation are skipped.
        """
        raw = self.storage.get_item(self.key)
        if not raw:
            return []

        try:
            entries = json.loads(raw)
        except ValueError as e:
            logger.error(f"Error loading cart from local storage: {e}")
            self.clear()
            return []

        if not isinstance(entries, list):
            self.clear()
            return []

        items: list[LocalCartItem] = []
        for entry in entries:
            try:
                items.append(LocalCartItem.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable local cart entry: {e}")
        logger.info(f"Loaded {len(items)} local cart items")
        return items

    def save(self, items: list[LocalCartItem]) -> None:
        """
        Persist the local custom-design lines among `items`.

        The slot is removed when there are none; a failed write removes it
        as well so a half-written slot is never read back.
        """
        local_designs = [it for it in items if it.is_custom_design]
        if not local_designs:
            self.clear()
            return

        payload = json.dumps(
            [it.model_dump(mode="json", by_alias=True) for it in local_designs]
        )
        if len(payload) > LARGE_SLOT_CHARS:
            logger.warning(
                f"Local cart slot is large ({len(payload)} chars, "
                f"{len(local_designs)} designs)"
            )

        try:
            self.storage.set_item(self.key, payload)
        except OSError as e:
            logger.error(f"Failed to save cart to local storage: {e}")
            self.clear()
            return
        logger.info(f"Saved {len(local_designs)} local cart items")

    def clear(self) -> None:
        try:
            self.storage.remove_item(self.key)
        except OSError as e:
            logger.error(f"Failed to clear local cart storage: {e}")

    def has_items(self) -> bool:
        return bool(self.storage.get_item(self.key))
