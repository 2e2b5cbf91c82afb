"""
Equipment tag normalization and the equipment filter.

User equipment is free-form text ("Dumbbell", "DB", "pullup bar"); catalog
tags are a small fixed vocabulary. Both sides go through the same
normalizer before they are compared.
"""

import logging
import re


logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Alias groups: first entry in each group is the canonical tag.
# ---------------------------------------------------------------------------
EQUIPMENT_ALIAS_GROUPS = (
    ("dumbbells", "dumbbell", "db", "dbs"),
    ("barbell", "barbells", "bar bell"),
    ("bodyweight", "body weight", "body only", "body-weight", "none"),
    ("machine", "machines"),
    ("cable", "cables", "cable machine"),
    ("kettlebell", "kettlebells"),
    ("pull-up-bar", "pull-up bar", "pullup bar", "pull up bar", "chin-up bar"),
    ("bench", "benches", "flat bench"),
    ("bike", "stationary bike", "exercise bike"),
)

NO_EQUIPMENT = "bodyweight"

# Owning a barbell or dumbbells implies access to a bench.
BENCH_PROVIDERS = frozenset({"barbell", "dumbbells", "bench"})

# Used when a profile lists no equipment at all.
DEFAULT_GYM_EQUIPMENT = ("barbell", "dumbbells", "machine", "cable", "bodyweight")


class EquipmentNormalizer:
    """
    Map free-form equipment names onto canonical catalog tags.

    Usage:
        normalizer = EquipmentNormalizer()
        normalizer.canonical_tag("Dumbbell")       # -> "dumbbells"
        normalizer.normalize_set(["DB", "bench"])  # -> {"dumbbells", "bench"}
    """

    def __init__(self, extra_aliases=None):
        self._alias_to_canonical = {}
        for group in EQUIPMENT_ALIAS_GROUPS:
            canonical = self._compute_key(group[0])
            for alias in group:
                self._alias_to_canonical[self._compute_key(alias)] = canonical

        # Config-supplied aliases: {alias: canonical}
        for alias, canonical in (extra_aliases or {}).items():
            if not alias or not canonical:
                continue
            canonical_key = self.canonical_tag(str(canonical))
            self._alias_to_canonical[self._compute_key(str(alias))] = canonical_key

    @staticmethod
    def _compute_key(name):
        return re.sub(r"\s+", " ", str(name or "").strip().lower())

    def canonical_tag(self, name):
        key = self._compute_key(name)
        if not key:
            return ""
        if key in self._alias_to_canonical:
            return self._alias_to_canonical[key]
        # "pull up bar" vs "pull-up-bar": retry with hyphens as spaces
        spaced = key.replace("-", " ")
        return self._alias_to_canonical.get(spaced, key)

    def normalize_set(self, names):
        return {tag for tag in (self.canonical_tag(n) for n in names or ()) if tag}

    def requires_no_equipment(self, exercise):
        tags = self.normalize_set(exercise.equipment)
        return not tags or tags == {NO_EQUIPMENT}


# ---------------------------------------------------------------------------
# Module-level default normalizer
# ---------------------------------------------------------------------------
_default_normalizer = None


def get_normalizer():
    """Get or create the shared normalizer with the built-in alias groups."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = EquipmentNormalizer()
    return _default_normalizer


def reset_normalizer():
    """Reset the shared normalizer (useful for testing)."""
    global _default_normalizer
    _default_normalizer = None


def is_available(exercise, user_tags, normalizer=None):
    """
    Check whether ``exercise`` can be performed with ``user_tags``.

    ``user_tags`` must already be normalized.
    """
    normalizer = normalizer or get_normalizer()
    if normalizer.requires_no_equipment(exercise):
        return True

    required = normalizer.normalize_set(exercise.equipment)
    if not required & user_tags:
        return False
    if "bench" in required and not (user_tags & BENCH_PROVIDERS):
        return False
    return True


def filter_by_equipment(exercises, user_equipment, normalizer=None):
    """Exercises performable with ``user_equipment``, in catalog order."""
    normalizer = normalizer or get_normalizer()
    user_tags = normalizer.normalize_set(user_equipment)
    return [ex for ex in exercises if is_available(ex, user_tags, normalizer)]


def available_exercises(exercises, user_equipment, normalizer=None):
    """
    Equipment filter with the fallback chain applied.

    Filtered list first; when that is empty, exercises needing no equipment;
    when that is empty too, the whole catalog. Returns an empty list only
    when ``exercises`` itself is empty.

    ``is_available`` already admits every no-equipment exercise, so an empty
    filtered list means the bodyweight step is empty too. The step is kept
    as a safety net in case the filter rules ever stop admitting them.
    """
    normalizer = normalizer or get_normalizer()
    exercises = list(exercises)
    equipment = list(user_equipment or ()) or list(DEFAULT_GYM_EQUIPMENT)

    filtered = filter_by_equipment(exercises, equipment, normalizer)
    if filtered:
        return filtered

    bodyweight_only = [ex for ex in exercises if normalizer.requires_no_equipment(ex)]
    if bodyweight_only:
        logger.debug("No exercises match %s; falling back to bodyweight exercises", equipment)
        return bodyweight_only

    logger.debug("No bodyweight exercises either; using the full catalog")
    return exercises
