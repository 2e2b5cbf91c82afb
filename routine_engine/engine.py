"""
Engine facade.

``RoutineEngine`` binds a catalog and a configuration together so callers
can generate, compare, analyze and improve routines without passing the
catalog around. The module-level functions use a shared engine built on
first use from the default configuration.
"""

import logging

from routine_engine import analyzer, generator, improver, similarity
from routine_engine.catalog import load_catalog
from routine_engine.config import load_config
from routine_engine.equipment import EquipmentNormalizer
from routine_engine.models import as_profile, as_routine
from routine_engine.validator import validate_routine


logger = logging.getLogger(__name__)


class RoutineEngine:
    """
    Usage:
        engine = RoutineEngine()
        routine = engine.generate_routine({"goal": "strength", "experience": "beginner",
                                           "days_per_week": 3, "equipment": ["barbell"]})
        analysis = engine.analyze_routine(routine)
    """

    def __init__(self, catalog=None, config=None):
        self.config = config if config is not None else load_config()
        self.catalog = catalog if catalog is not None else load_catalog(self.config.get("catalog_path"))
        self.normalizer = EquipmentNormalizer(self.config.get("equipment_aliases"))
        logger.debug("Engine ready with %d catalog exercises", len(self.catalog))

    def _analysis_options(self):
        analysis = self.config.get("analysis") or {}
        return {
            "focus_muscle_group": analysis.get("focus_muscle_group", analyzer.DEFAULT_FOCUS_MUSCLE_GROUP),
            "preferred_equipment": analysis.get("preferred_equipment", analyzer.DEFAULT_PREFERRED_EQUIPMENT),
        }

    def _rest_floor(self):
        improver_config = self.config.get("improver") or {}
        return improver_config.get("compound_rest_floor_seconds", improver.COMPOUND_REST_FLOOR_SECONDS)

    def generate_routine(self, profile):
        return generator.generate_routine(as_profile(profile), self.catalog, self.normalizer)

    def find_similar_exercises(self, exercise_id, limit=None):
        if limit is None:
            limit = (self.config.get("similarity") or {}).get("default_limit", 5)
        return similarity.find_similar_exercises(exercise_id, self.catalog, limit, self.normalizer)

    def search_exercises(self, query):
        return self.catalog.search_exercises(query)

    def analyze_routine(self, routine):
        return analyzer.analyze_routine(as_routine(routine), self.catalog, **self._analysis_options())

    def improve_routine(self, routine, now=None):
        return improver.improve_routine(
            routine, self.catalog, rest_floor=self._rest_floor(), now=now, **self._analysis_options()
        )

    def preview_improvements(self, routine):
        return improver.preview_improvements(
            routine, self.catalog, rest_floor=self._rest_floor(), **self._analysis_options()
        )

    def validate_routine(self, routine):
        return validate_routine(as_routine(routine), self.catalog)


# ---------------------------------------------------------------------------
# Module-level default engine
# ---------------------------------------------------------------------------
_default_engine = None


def get_engine():
    """Get or create the shared engine."""
    global _default_engine
    if _default_engine is None:
        _default_engine = RoutineEngine()
    return _default_engine


def reset_engine():
    """Reset the shared engine (useful for testing)."""
    global _default_engine
    _default_engine = None


def generate_routine(profile):
    return get_engine().generate_routine(profile)


def find_similar_exercises(exercise_id, limit=None):
    return get_engine().find_similar_exercises(exercise_id, limit)


def analyze_routine(routine):
    return get_engine().analyze_routine(routine)


def improve_routine(routine):
    return get_engine().improve_routine(routine)


def preview_improvements(routine):
    return get_engine().preview_improvements(routine)
