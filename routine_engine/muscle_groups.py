"""
Resolve abstract session labels ("chest", "legs"...) to catalog exercises.
"""

# Session label -> catalog muscle-group tags
MUSCLE_GROUP_MAP = {
    "chest": ("chest",),
    "back": ("back", "lats", "rhomboids", "traps"),
    "legs": ("legs", "quadriceps", "hamstrings", "glutes", "calves"),
    "shoulders": ("shoulders", "deltoids", "delts"),
    "arms": ("biceps", "triceps", "arms"),
    "core": ("core", "abs", "abdominals"),
}


def tags_match(tag, target):
    """Loose tag comparison: equal, or either one contains the other."""
    tag = tag.lower()
    target = target.lower()
    return tag == target or target in tag or tag in target


def exercises_for_muscle_group(muscle_group, exercises):
    """Exercises whose primary or secondary tags loosely match ``muscle_group``."""
    target = (muscle_group or "").strip().lower()
    if not target:
        return []
    return [
        ex for ex in exercises
        if any(tags_match(tag, target) for tag in ex.primary_muscles)
        or any(tags_match(tag, target) for tag in ex.secondary_muscles)
    ]


def resolve_muscle_group(label, exercises):
    """
    Candidate exercises for a session label.

    Matches for every mapped tag come first (in mapping order), then direct
    matches on the raw label. Duplicates are dropped by exercise id, keeping
    the first occurrence.
    """
    label = (label or "").strip().lower()
    candidates = []
    for tag in MUSCLE_GROUP_MAP.get(label, ()):
        candidates.extend(exercises_for_muscle_group(tag, exercises))
    candidates.extend(exercises_for_muscle_group(label, exercises))

    seen = set()
    unique = []
    for exercise in candidates:
        if exercise.id in seen:
            continue
        seen.add(exercise.id)
        unique.append(exercise)
    return unique
