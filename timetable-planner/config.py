from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple
import yaml

DEFAULT_SUBJECT_NAMES = [
    "Mathematics",
    "Science",
    "History",
    "Language Arts",
    "Computer Studies",
    "Physical Education",
]

DEFAULT_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


@dataclass
class FormCfg:
    subject_count: int = 5
    max_subjects: int = 12  # Upper bound of the subject count input
    periods_per_day: int = 6
    section_count: int = 1
    days: List[str] = field(default_factory=lambda: list(DEFAULT_DAYS))
    subject_names: List[str] = field(default_factory=lambda: list(DEFAULT_SUBJECT_NAMES))

    def clamp_subject_count(self, value: int) -> int:
        return min(max(value, 1), self.max_subjects)

    def limit_subjects(self, subjects: List) -> Tuple[List, int]:
        """Keeps the first max_subjects entries and reports how many were cut."""
        return subjects[:self.max_subjects], max(0, len(subjects) - self.max_subjects)


@dataclass
class ApiCfg:
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class AppConfig:
    form: FormCfg = field(default_factory=FormCfg)
    api: ApiCfg = field(default_factory=ApiCfg)
    state_file: str = "timetable-planner-state-v1.json"  # Local save slot for the planner form
    debug: bool = False  # Control logging verbosity

    @classmethod
    def load(cls, path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        return cls(
            form=FormCfg(**data.get("form", {})),
            api=ApiCfg(**data.get("api", {})),
            state_file=data.get("state_file", "timetable-planner-state-v1.json"),
            debug=data.get("debug", False),
        )
