"""
Data model for exercises, user profiles and training routines.

Records are plain dataclasses. Every model round-trips through ``to_dict`` /
``from_dict``; ``from_dict`` also accepts the camelCase keys used by older
stored routines (``exerciseId``, ``restTime``, ``restAfter``...).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class Goal(str, Enum):
    """Training goal of a user profile."""
    STRENGTH = "strength"
    MUSCLE_GAIN = "gain_muscle"
    FAT_LOSS = "lose_weight"
    ENDURANCE = "endurance"
    MAINTENANCE = "maintenance"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower().replace(" ", "_")
        goal = GOAL_ALIASES.get(key)
        if goal is None:
            raise ValueError(f"Unknown training goal: {value!r}")
        return goal


GOAL_ALIASES = {
    "strength": Goal.STRENGTH,
    "gain_muscle": Goal.MUSCLE_GAIN,
    "muscle_gain": Goal.MUSCLE_GAIN,
    "muscle-gain": Goal.MUSCLE_GAIN,
    "bulking": Goal.MUSCLE_GAIN,
    "hypertrophy": Goal.MUSCLE_GAIN,
    "lose_weight": Goal.FAT_LOSS,
    "fat_loss": Goal.FAT_LOSS,
    "fat-loss": Goal.FAT_LOSS,
    "cutting": Goal.FAT_LOSS,
    "endurance": Goal.ENDURANCE,
    "maintenance": Goal.MAINTENANCE,
    "custom": Goal.CUSTOM,
}


class Level(str, Enum):
    """Experience of a user, and difficulty tier of an exercise."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self):
        return LEVEL_RANK[self]

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            raise ValueError(f"Unknown level: {value!r}") from None


LEVEL_RANK = {
    Level.BEGINNER: 0,
    Level.INTERMEDIATE: 1,
    Level.ADVANCED: 2,
}


class Category(str, Enum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"
    BALANCE = "balance"
    OTHER = "other"

    @classmethod
    def parse(cls, value):
        try:
            return cls(str(value or "other").strip().lower())
        except ValueError:
            return cls.OTHER


class SetType(str, Enum):
    WARMUP = "warmup"
    WORKING = "working"
    DROP = "drop"
    FAILURE = "failure"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "working").strip().lower())
        except ValueError:
            raise ValueError(f"Unknown set type: {value!r}") from None


def _tags(values):
    return tuple(str(v).strip().lower() for v in (values or []) if str(v).strip())


def _pick(data, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _optional_int(value):
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class ExerciseRecord:
    """Immutable catalog entry."""
    id: str
    name: str
    category: Category
    primary_muscles: Tuple[str, ...]
    secondary_muscles: Tuple[str, ...]
    equipment: Tuple[str, ...]
    difficulty: Level
    description: str = ""

    @property
    def muscle_groups(self):
        return self.primary_muscles + self.secondary_muscles

    @classmethod
    def from_dict(cls, data):
        exercise_id = str(data.get("id") or "").strip()
        if not exercise_id:
            raise ValueError(f"Exercise entry without id: {data!r}")
        muscles = data.get("muscle_groups") or data.get("muscleGroups") or {}
        return cls(
            id=exercise_id,
            name=str(data.get("name") or exercise_id),
            category=Category.parse(data.get("category")),
            primary_muscles=_tags(_pick(muscles, "primary", default=data.get("primary"))),
            secondary_muscles=_tags(_pick(muscles, "secondary", default=data.get("secondary"))),
            equipment=_tags(data.get("equipment")),
            difficulty=Level.parse(data.get("difficulty") or "beginner"),
            description=str(data.get("description") or ""),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "muscle_groups": {
                "primary": list(self.primary_muscles),
                "secondary": list(self.secondary_muscles),
            },
            "equipment": list(self.equipment),
            "difficulty": self.difficulty.value,
            "description": self.description,
        }


@dataclass
class UserProfile:
    goal: Goal
    experience: Level
    days_per_week: int
    equipment: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data):
        days = _pick(data, "days_per_week", "daysPerWeek", default=3)
        try:
            days = int(days)
        except (TypeError, ValueError):
            raise ValueError(f"days_per_week must be an integer, got {days!r}") from None
        return cls(
            goal=Goal.parse(data.get("goal")),
            experience=Level.parse(data.get("experience")),
            days_per_week=days,
            equipment=tuple(str(e).strip() for e in (data.get("equipment") or []) if str(e).strip()),
        )

    def to_dict(self):
        return {
            "goal": self.goal.value,
            "experience": self.experience.value,
            "days_per_week": self.days_per_week,
            "equipment": list(self.equipment),
        }


@dataclass
class SetConfiguration:
    set_type: SetType = SetType.WORKING
    target_reps: Optional[int] = None
    target_weight: Optional[float] = None
    rest_after_seconds: Optional[int] = None

    @property
    def is_working(self):
        """Warm-ups are the only sets that do not count toward volume."""
        return self.set_type != SetType.WARMUP

    @classmethod
    def from_dict(cls, data):
        weight = _pick(data, "target_weight", "targetWeight")
        return cls(
            set_type=SetType.parse(_pick(data, "set_type", "setType")),
            target_reps=_optional_int(_pick(data, "target_reps", "targetReps")),
            target_weight=float(weight) if weight is not None else None,
            rest_after_seconds=_optional_int(
                _pick(data, "rest_after_seconds", "restAfterSeconds", "restAfter")
            ),
        )

    def to_dict(self):
        return {
            "set_type": self.set_type.value,
            "target_reps": self.target_reps,
            "target_weight": self.target_weight,
            "rest_after_seconds": self.rest_after_seconds,
        }


@dataclass
class RoutineExercise:
    exercise_id: str
    order: int
    sets: List[SetConfiguration] = field(default_factory=list)
    rest_time_seconds: Optional[int] = None
    notes: Optional[str] = None

    @property
    def working_sets(self):
        return [s for s in self.sets if s.is_working]

    @classmethod
    def from_dict(cls, data):
        return cls(
            exercise_id=str(_pick(data, "exercise_id", "exerciseId", default="")),
            order=_optional_int(data.get("order")) or 0,
            sets=[SetConfiguration.from_dict(s) for s in data.get("sets") or []],
            rest_time_seconds=_optional_int(
                _pick(data, "rest_time_seconds", "restTimeSeconds", "restTime")
            ),
            notes=data.get("notes"),
        )

    def to_dict(self):
        return {
            "exercise_id": self.exercise_id,
            "order": self.order,
            "sets": [s.to_dict() for s in self.sets],
            "rest_time_seconds": self.rest_time_seconds,
            "notes": self.notes,
        }


@dataclass
class RoutineSession:
    id: str
    name: str
    order: int
    exercises: List[RoutineExercise] = field(default_factory=list)
    estimated_duration_minutes: int = 0

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            order=_optional_int(data.get("order")) or 0,
            exercises=[RoutineExercise.from_dict(e) for e in data.get("exercises") or []],
            estimated_duration_minutes=_optional_int(
                _pick(data, "estimated_duration_minutes", "estimatedDuration")
            ) or 0,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "order": self.order,
            "exercises": [e.to_dict() for e in self.exercises],
            "estimated_duration_minutes": self.estimated_duration_minutes,
        }


@dataclass
class Routine:
    id: str = ""
    name: str = ""
    description: str = ""
    goal: str = "custom"
    difficulty: str = "medium"
    tags: List[str] = field(default_factory=list)
    sessions: List[RoutineSession] = field(default_factory=list)
    exercises: List[RoutineExercise] = field(default_factory=list)
    estimated_duration_minutes: int = 0
    created_by: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def iter_sessions(self):
        """
        Sessions to walk for analysis.

        Legacy routines store a flat exercise list instead of sessions; they
        are presented as a single unnamed session.
        """
        if self.sessions:
            return list(self.sessions)
        if self.exercises:
            return [RoutineSession(id="", name="", order=0, exercises=self.exercises)]
        return []

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            goal=str(data.get("goal") or "custom"),
            difficulty=str(data.get("difficulty") or "medium"),
            tags=[str(t) for t in data.get("tags") or []],
            sessions=[RoutineSession.from_dict(s) for s in data.get("sessions") or []],
            exercises=[RoutineExercise.from_dict(e) for e in data.get("exercises") or []],
            estimated_duration_minutes=_optional_int(
                _pick(data, "estimated_duration_minutes", "estimatedDuration")
            ) or 0,
            created_by=str(_pick(data, "created_by", "createdBy", default="")),
            created_at=_parse_datetime(_pick(data, "created_at", "createdAt")),
            updated_at=_parse_datetime(_pick(data, "updated_at", "updatedAt")),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "goal": self.goal,
            "difficulty": self.difficulty,
            "tags": list(self.tags),
            "sessions": [s.to_dict() for s in self.sessions],
            "exercises": [e.to_dict() for e in self.exercises],
            "estimated_duration_minutes": self.estimated_duration_minutes,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def as_routine(value):
    """Accept a Routine or a plain dict."""
    if isinstance(value, Routine):
        return value
    return Routine.from_dict(value or {})


def as_profile(value):
    if isinstance(value, UserProfile):
        return value
    return UserProfile.from_dict(value or {})
