import random
import string
import time
from pathlib import Path
from typing import Any, Dict, List, Optional
from schemas import SavedTimetable, TimetableSummary, StoredState
from log import LOGGER_NAME, get_logger

logger = get_logger(f"{LOGGER_NAME}.storage")

BASE36_ALPHABET = string.digits + string.ascii_lowercase

class RecordNotFoundError(LookupError):
    """Raised when no timetable is stored under the requested id."""

def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))

def generate_record_id() -> str:
    """<milliseconds since epoch in base36>-<six random base36 characters>"""
    suffix = "".join(random.choices(BASE36_ALPHABET, k=6))
    return f"{_to_base36(int(time.time() * 1000))}-{suffix}"

class TimetableStore:
    """
    Keeps saved timetables in memory. Payloads are stored and returned verbatim;
    saving under an existing id replaces that record.
    """

    def __init__(self):
        self._records: Dict[str, SavedTimetable] = {}

    def save(self, payload: Any, record_id: Optional[str] = None, teacher_name: Optional[str] = None) -> str:
        record_id = record_id if isinstance(record_id, str) and record_id else generate_record_id()
        self._records[record_id] = SavedTimetable(id=record_id, teacher_name=teacher_name, payload=payload)
        logger.info("Saved timetable %s.", record_id)
        return record_id

    def get(self, record_id: str) -> SavedTimetable:
        if record_id not in self._records:
            raise RecordNotFoundError(record_id)
        return self._records[record_id]

    def list(self) -> List[TimetableSummary]:
        return [
            TimetableSummary(id=record.id, teacher_name=record.teacher_name)
            for record in self._records.values()
        ]

    def __len__(self) -> int:
        return len(self._records)

class LocalStateStore:
    """Single-slot JSON file holding the planner form and the last timetable."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[StoredState]:
        """Returns None when nothing is saved; an unreadable file is logged and treated the same way."""
        if not self.path.exists():
            return None
        try:
            return StoredState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Failed to parse saved timetable state at %s: %s", self.path, e)
            return None

    def save(self, state: StoredState):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(state.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Timetable state saved to %s.", self.path)

    def clear(self):
        self.path.unlink(missing_ok=True)
