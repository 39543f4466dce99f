"""Calculation history for Super Calc.

The history is an ordered log, most recent first, capped at a fixed number
of entries (100 by default). Operations:
- Append (prepend + evict the oldest beyond the cap + persist the full log)
- Case-insensitive search over result and expression
- Clear (only after explicit confirmation)
- Share an entry as plain text

The log is persisted under the "calculatorHistory" key as a JSON array.
"""

import asyncio
import json
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .errors import StorageError
from .storage import HISTORY_KEY, KeyValueStore

logger = logging.getLogger(__name__)

console = Console()

DEFAULT_HISTORY_LIMIT = 100

_id_lock = threading.Lock()
_last_id = 0


class HistoryKind(Enum):
    """What produced a history entry."""

    CALCULATION = "calculation"
    CONVERSION = "conversion"
    TIP = "tip"


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_id(timestamp: Optional[int] = None) -> str:
    """Generate a unique id from the current epoch milliseconds.

    Ids are strictly increasing within the process, so two entries created in
    the same millisecond still get distinct ids.
    """
    global _last_id
    with _id_lock:
        candidate = timestamp if timestamp is not None else _now_ms()
        _last_id = max(candidate, _last_id + 1)
        return str(_last_id)


@dataclass(frozen=True)
class HistoryItem:
    """A single history entry. Never mutated after creation."""

    id: str
    kind: HistoryKind
    result: str
    timestamp: int
    expression: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def create(
        cls,
        kind: HistoryKind,
        result: str,
        expression: Optional[str] = None,
        category: Optional[str] = None,
    ) -> "HistoryItem":
        """Create an entry stamped with the current time."""
        timestamp = _now_ms()
        return cls(
            id=generate_id(timestamp),
            kind=kind,
            result=result,
            timestamp=timestamp,
            expression=expression,
            category=category,
        )

    @property
    def display_text(self) -> str:
        """Plain-text form used for listing and sharing."""
        if self.kind is HistoryKind.CALCULATION and self.expression:
            return f"{self.expression} = {self.result}"
        return self.result

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on result and expression."""
        needle = query.lower()
        if needle in self.result.lower():
            return True
        return bool(self.expression) and needle in self.expression.lower()

    def to_dict(self) -> dict:
        """Convert to the persisted JSON shape."""
        data = {"id": self.id, "type": self.kind.value}
        if self.expression is not None:
            data["expression"] = self.expression
        data["result"] = self.result
        data["timestamp"] = self.timestamp
        if self.category is not None:
            data["category"] = self.category
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryItem":
        """Create from the persisted JSON shape.

        Raises:
            ValueError: Unknown type or missing/ill-typed fields.
        """
        if not isinstance(data, dict):
            raise ValueError(f"History entry must be an object, got {type(data).__name__}")
        item_id = data["id"]
        result = data["result"]
        timestamp = data["timestamp"]
        expression = data.get("expression")
        category = data.get("category")
        if not isinstance(item_id, str) or not isinstance(result, str):
            raise ValueError("History entry id and result must be strings")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ValueError("History entry timestamp must be an integer")
        for optional in (expression, category):
            if optional is not None and not isinstance(optional, str):
                raise ValueError("History entry expression and category must be strings")
        return cls(
            id=item_id,
            kind=HistoryKind(data["type"]),
            result=result,
            timestamp=timestamp,
            expression=expression,
            category=category,
        )


def history_to_json(items: Iterable[HistoryItem]) -> str:
    """Serialize a log (most recent first) to JSON."""
    return json.dumps([item.to_dict() for item in items], ensure_ascii=False)


def history_from_json(text: str) -> List[HistoryItem]:
    """Deserialize a persisted log.

    Raises:
        ValueError: If the text is not a JSON array of valid entries.
    """
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Persisted history must be a JSON array")
    try:
        return [HistoryItem.from_dict(entry) for entry in data]
    except KeyError as e:
        raise ValueError(f"History entry missing field {e}") from e


class HistoryManager:
    """Owns the in-memory log and keeps the store in sync with it."""

    def __init__(
        self,
        store: KeyValueStore,
        limit: int = DEFAULT_HISTORY_LIMIT,
        sharer=None,
    ):
        """Initialize the manager.

        Args:
            store: Persistence adapter.
            limit: Maximum entries kept (oldest evicted first).
            sharer: Object with an async share(message) method.
        """
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.store = store
        self.limit = limit
        self.sharer = sharer
        self._items: Tuple[HistoryItem, ...] = ()
        self._loaded = False
        self._write_lock: Optional[asyncio.Lock] = None

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def items(self) -> Tuple[HistoryItem, ...]:
        """Snapshot of the log, most recent first."""
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def _get_write_lock(self) -> asyncio.Lock:
        if self._write_lock is None:
            self._write_lock = asyncio.Lock()
        return self._write_lock

    async def load(self) -> Tuple[HistoryItem, ...]:
        """Load the persisted log.

        A missing key, a store failure, or unreadable content all yield an
        empty history.
        """
        items: List[HistoryItem] = []
        try:
            raw = await self.store.get(HISTORY_KEY)
            if raw:
                items = history_from_json(raw)
        except StorageError as e:
            logger.error("Error loading history: %s", e)
        except ValueError as e:
            logger.warning("Ignoring unreadable history: %s", e)
            items = []

        self._items = tuple(items[: self.limit])
        self._loaded = True
        logger.debug("Loaded %d history entries", len(self._items))
        return self._items

    async def append(self, item: HistoryItem) -> Tuple[HistoryItem, ...]:
        """Prepend an entry, evict beyond the limit and persist the full log.

        A failed write is logged; the in-memory log keeps the new entry.
        """
        async with self._get_write_lock():
            self._items = ((item,) + self._items)[: self.limit]
            snapshot = self._items
            try:
                await self.store.set(HISTORY_KEY, history_to_json(snapshot))
            except StorageError as e:
                logger.error("Error saving history: %s", e)
        return snapshot

    def search(self, query: str = "") -> List[HistoryItem]:
        """Entries whose result or expression contains query, most recent first."""
        if not query:
            return list(self._items)
        return [item for item in self._items if item.matches(query)]

    def get(self, item_id: str) -> Optional[HistoryItem]:
        """Get an entry by id."""
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    async def clear(self, confirm: Callable[[], bool]) -> bool:
        """Clear the log and its persisted copy after confirmation.

        Args:
            confirm: Returns True to proceed. Anything else cancels.

        Returns:
            True if the history was cleared.
        """
        if not confirm():
            logger.debug("Clear history cancelled")
            return False

        async with self._get_write_lock():
            self._items = ()
            try:
                await self.store.remove(HISTORY_KEY)
            except StorageError as e:
                logger.error("Error removing history: %s", e)
        return True

    async def share(self, item: HistoryItem) -> bool:
        """Hand an entry's text to the sharer.

        Sharer failures are logged and reported as False.
        """
        if self.sharer is None:
            logger.error("Error sharing: no share target configured")
            return False
        try:
            await self.sharer.share(item.display_text)
        except Exception as e:
            logger.error("Error sharing: %s", e)
            return False
        return True

    def show_table(self, items: Optional[List[HistoryItem]] = None, title: str = "History"):
        """Display entries as a table."""
        entries = list(self._items) if items is None else items
        if not entries:
            console.print("[dim]No history yet.[/dim]")
            return

        table = Table(title=title)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Type", style="magenta")
        table.add_column("Entry", style="white")
        table.add_column("Category", style="yellow")
        table.add_column("Date", style="dim")

        for item in entries:
            table.add_row(
                item.id,
                item.kind.value.capitalize(),
                escape(item.display_text),
                item.category or "",
                item.created_at.strftime("%Y-%m-%d %H:%M"),
            )

        console.print(table)


async def load_history_manager(
    store: KeyValueStore, limit: int = DEFAULT_HISTORY_LIMIT, sharer=None
) -> HistoryManager:
    """Create a manager and load the persisted log.

    Args:
        store: Persistence adapter.
        limit: Maximum entries kept.
        sharer: Optional share target.

    Returns:
        Loaded HistoryManager.
    """
    manager = HistoryManager(store, limit=limit, sharer=sharer)
    await manager.load()
    return manager
