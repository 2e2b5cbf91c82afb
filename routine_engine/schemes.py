"""
Set/rep/rest prescriptions by goal, experience and exercise kind.
"""

from collections import namedtuple

from routine_engine.models import Goal, Level, SetConfiguration, SetType


Scheme = namedtuple("Scheme", ["sets", "reps", "rest_seconds"])

# Per-level values are (beginner, intermediate, advanced).
SchemeTable = namedtuple(
    "SchemeTable",
    ["sets", "compound_reps", "isolation_reps", "compound_rest", "isolation_rest"],
)

DEFAULT_TABLE = SchemeTable(
    sets=(3, 4, 4),
    compound_reps=(8, 8, 8),
    isolation_reps=(10, 10, 10),
    compound_rest=120,
    isolation_rest=90,
)

SCHEME_TABLES = {
    Goal.STRENGTH: SchemeTable(
        sets=(3, 4, 5),
        compound_reps=(5, 4, 4),
        isolation_reps=(6, 6, 6),
        compound_rest=180,
        isolation_rest=120,
    ),
    Goal.MUSCLE_GAIN: SchemeTable(
        sets=(3, 4, 5),
        compound_reps=(8, 6, 6),
        isolation_reps=(12, 10, 10),
        compound_rest=120,
        isolation_rest=90,
    ),
    Goal.FAT_LOSS: SchemeTable(
        sets=(3, 4, 4),
        compound_reps=(12, 10, 10),
        isolation_reps=(15, 15, 15),
        compound_rest=90,
        isolation_rest=60,
    ),
    Goal.ENDURANCE: SchemeTable(
        sets=(3, 3, 3),
        compound_reps=(15, 15, 15),
        isolation_reps=(15, 15, 15),
        compound_rest=45,
        isolation_rest=45,
    ),
    Goal.MAINTENANCE: DEFAULT_TABLE,
    Goal.CUSTOM: DEFAULT_TABLE,
}

WARMUP_REPS = 10
WARMUP_REST_SECONDS = 60


def get_scheme(goal, experience, compound):
    """Return the Scheme for a (goal, experience, compound?) combination."""
    table = SCHEME_TABLES[Goal.parse(goal)]
    level = Level.parse(experience).rank
    if compound:
        return Scheme(table.sets[level], table.compound_reps[level], table.compound_rest)
    return Scheme(table.sets[level], table.isolation_reps[level], table.isolation_rest)


def build_sets(goal, experience, compound):
    """
    Full set list for one exercise.

    Compound lifts get a warm-up set first unless the user is a beginner.
    Target weight is left unset for the user to fill in.
    """
    scheme = get_scheme(goal, experience, compound)
    sets = []
    if compound and Level.parse(experience) != Level.BEGINNER:
        sets.append(SetConfiguration(
            set_type=SetType.WARMUP,
            target_reps=WARMUP_REPS,
            rest_after_seconds=WARMUP_REST_SECONDS,
        ))
    for _ in range(scheme.sets):
        sets.append(SetConfiguration(
            set_type=SetType.WORKING,
            target_reps=scheme.reps,
            rest_after_seconds=scheme.rest_seconds,
        ))
    return sets, scheme
