"""
Compound-exercise classification and candidate ranking.
"""

from routine_engine.models import Level


# Canonical compound lifts, classified as compound regardless of their tags.
COMPOUND_EXERCISE_IDS = frozenset({
    "squat",
    "front-squat",
    "deadlift",
    "romanian-deadlift",
    "bench-press",
    "incline-bench-press",
    "dumbbell-bench-press",
    "overhead-press",
    "barbell-row",
    "pull-ups",
    "chin-ups",
    "clean-and-press",
    "thrusters",
})

ALLOWED_DIFFICULTIES = {
    Level.BEGINNER: frozenset({Level.BEGINNER, Level.INTERMEDIATE}),
    Level.INTERMEDIATE: frozenset({Level.BEGINNER, Level.INTERMEDIATE}),
    Level.ADVANCED: frozenset({Level.BEGINNER, Level.INTERMEDIATE, Level.ADVANCED}),
}


def is_compound(exercise):
    """
    Compound if allow-listed, or it has two or more primary tags, or one
    primary tag plus at least two secondary tags.
    """
    if exercise.id in COMPOUND_EXERCISE_IDS:
        return True
    primary = len(exercise.primary_muscles)
    secondary = len(exercise.secondary_muscles)
    return primary >= 2 or (primary >= 1 and secondary >= 2)


def allowed_for(exercises, experience):
    allowed = ALLOWED_DIFFICULTIES[Level.parse(experience)]
    return [ex for ex in exercises if ex.difficulty in allowed]


def rank_key(exercise, experience):
    """
    Sort key for one candidate.

    Exact difficulty match first; then harder-first for intermediate and
    advanced users, easier-first for beginners; then compound before
    isolation.
    """
    experience = Level.parse(experience)
    exact = 0 if exercise.difficulty == experience else 1
    if experience == Level.BEGINNER:
        direction = exercise.difficulty.rank
    else:
        direction = -exercise.difficulty.rank
    kind = 0 if is_compound(exercise) else 1
    return (exact, direction, kind)


def rank_exercises(exercises, experience):
    """Stable sort of ``exercises`` for a user of the given experience."""
    return sorted(exercises, key=lambda ex: rank_key(ex, experience))
