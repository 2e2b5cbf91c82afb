"""
Read-only exercise catalog.

The engine only ever looks exercises up; it never adds, edits or removes
entries once the catalog is loaded.
"""

import logging
import os

import yaml

from routine_engine.models import Category, ExerciseRecord


logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(__file__), "data", "exercises.yaml")


class ExerciseCatalog:
    """
    Immutable, ordered collection of exercise records.

    Usage:
        catalog = load_catalog()
        catalog.get_exercise_by_id("bench-press").name  # -> "Bench Press"
        catalog.search_exercises("chest")                # -> [ExerciseRecord, ...]
    """

    def __init__(self, exercises=()):
        self._exercises = tuple(exercises)
        self._by_id = {}
        for exercise in self._exercises:
            # First entry wins on duplicate ids
            self._by_id.setdefault(exercise.id, exercise)

    def __len__(self):
        return len(self._exercises)

    def __iter__(self):
        return iter(self._exercises)

    def __contains__(self, exercise_id):
        return exercise_id in self._by_id

    def list_all(self):
        return list(self._exercises)

    def get_exercise_by_id(self, exercise_id):
        """Return the record for ``exercise_id`` or None when unknown."""
        return self._by_id.get(exercise_id)

    def search_exercises(self, query):
        """Case-insensitive substring match on name or any muscle-group tag."""
        needle = (query or "").strip().lower()
        if not needle:
            return self.list_all()
        return [
            ex for ex in self._exercises
            if needle in ex.name.lower()
            or any(needle in tag for tag in ex.primary_muscles)
            or any(needle in tag for tag in ex.secondary_muscles)
        ]

    def get_exercises_by_category(self, category):
        category = Category.parse(category)
        return [ex for ex in self._exercises if ex.category == category]

    def get_exercises_by_muscle_group(self, muscle_group):
        tag = (muscle_group or "").strip().lower()
        return [ex for ex in self._exercises if tag in ex.muscle_groups]

    def get_exercises_by_equipment(self, equipment):
        tag = (equipment or "").strip().lower()
        return [ex for ex in self._exercises if tag in ex.equipment]


def load_catalog(path=None):
    """
    Load a catalog from a YAML file.

    The file holds a top-level ``exercises`` list. Malformed entries raise
    ValueError; a missing file raises FileNotFoundError.
    """
    path = path or DEFAULT_CATALOG_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"Exercise catalog not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("exercises") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ValueError(f"Exercise catalog {path} must contain an 'exercises' list")

    exercises = [ExerciseRecord.from_dict(entry) for entry in entries]
    logger.debug("Loaded %d exercises from %s", len(exercises), path)
    return ExerciseCatalog(exercises)
