"""
Rule-based routine generation.

Builds a multi-day program from a user profile: pick a split template by
training days, filter the catalog by equipment, then fill every session
muscle group by muscle group with ranked exercises and goal-specific
set/rep/rest schemes.
"""

import logging

from routine_engine.equipment import available_exercises
from routine_engine.models import (
    Goal,
    Level,
    Routine,
    RoutineExercise,
    RoutineSession,
)
from routine_engine.muscle_groups import resolve_muscle_group
from routine_engine.ranking import allowed_for, is_compound, rank_exercises
from routine_engine.schemes import build_sets


logger = logging.getLogger(__name__)

SPLIT_TEMPLATES = {
    2: ("full-body-1", "full-body-2"),
    3: ("push", "pull", "legs"),
    4: ("upper", "lower", "upper", "lower"),
    5: ("push", "pull", "legs", "upper", "lower"),
    6: ("push", "pull", "legs", "push", "pull", "legs"),
}
DEFAULT_SPLIT_DAYS = 3

# Session type -> (muscle groups, target exercise count per level)
SESSION_STRUCTURES = {
    "push": (("chest", "shoulders", "arms"), (4, 5, 6)),
    "pull": (("back", "arms"), (4, 5, 6)),
    "legs": (("legs", "core"), (4, 5, 6)),
    "upper": (("chest", "back", "shoulders", "arms"), (5, 6, 7)),
    "lower": (("legs", "core"), (4, 5, 6)),
    "full-body-1": (("chest", "back", "legs"), (5, 6, 7)),
    "full-body-2": (("shoulders", "arms", "core"), (4, 5, 6)),
}
DEFAULT_SESSION_TYPE = "full-body-1"

# These groups get two exercises per session instead of one
HIGH_VOLUME_GROUPS = frozenset({"legs", "chest", "back"})

SESSION_NAMES = {
    "push": ("Push Day", "Chest & Shoulders", "Upper Push"),
    "pull": ("Pull Day", "Back & Biceps", "Upper Pull"),
    "legs": ("Leg Day", "Lower Body", "Legs & Glutes"),
    "upper": ("Upper Body", "Upper Body Day", "Upper Body Workout"),
    "lower": ("Lower Body", "Lower Body Day", "Leg Day"),
    "full-body-1": ("Full Body", "Full Body Workout", "Total Body"),
    "full-body-2": ("Full Body", "Full Body Workout", "Total Body"),
}

DEFAULT_REST_SECONDS = 90
MINUTES_PER_EXERCISE = 5
MINUTES_PER_SET = 2

GOAL_NAMES = {
    Goal.MUSCLE_GAIN: "Muscle Gain",
    Goal.FAT_LOSS: "Weight Loss",
    Goal.MAINTENANCE: "Maintenance",
    Goal.STRENGTH: "Strength",
    Goal.ENDURANCE: "Endurance",
    Goal.CUSTOM: "Custom",
}

GOAL_DESCRIPTIONS = {
    Goal.MUSCLE_GAIN: "Designed for muscle hypertrophy with {days} training days per week. "
                      "Focus on progressive overload and proper form.",
    Goal.FAT_LOSS: "High-intensity routine for fat loss and muscle preservation. "
                   "{days} days per week with emphasis on compound movements.",
    Goal.MAINTENANCE: "Balanced routine to maintain current fitness level. "
                      "{days} days per week with moderate intensity.",
    Goal.STRENGTH: "Strength-focused routine emphasizing heavy compound lifts. "
                   "{days} days per week for maximum strength gains.",
    Goal.ENDURANCE: "Endurance-focused routine with higher reps and shorter rest periods. "
                    "{days} days per week.",
    Goal.CUSTOM: "Customized routine based on your profile. {days} days per week.",
}

ROUTINE_GOAL_LABELS = {
    Goal.MUSCLE_GAIN: "bulking",
    Goal.FAT_LOSS: "cutting",
    Goal.MAINTENANCE: "maintenance",
    Goal.STRENGTH: "strength",
    Goal.ENDURANCE: "endurance",
    Goal.CUSTOM: "custom",
}

DIFFICULTY_LABELS = {
    Level.BEGINNER: "easy",
    Level.INTERMEDIATE: "medium",
    Level.ADVANCED: "hard",
}


def split_template(days_per_week):
    return SPLIT_TEMPLATES.get(days_per_week, SPLIT_TEMPLATES[DEFAULT_SPLIT_DAYS])


def session_name(session_type, index):
    names = SESSION_NAMES.get(session_type, ("Workout",))
    return names[index % len(names)]


def _make_routine_exercise(exercise, order, goal, experience, with_notes):
    compound = is_compound(exercise)
    sets, scheme = build_sets(goal, experience, compound)
    return RoutineExercise(
        exercise_id=exercise.id,
        order=order,
        sets=sets,
        rest_time_seconds=scheme.rest_seconds,
        notes="Focus on form" if (compound and with_notes) else None,
    )


def generate_session_exercises(session_type, exercises, goal, experience):
    """
    Fill one session.

    Walks the session's muscle groups in order, taking the best-ranked unused
    candidates (two for legs/chest/back, one otherwise) until the target
    count is reached, then tops up from the remaining exercises in catalog
    order.
    """
    experience = Level.parse(experience)
    muscle_groups, counts = SESSION_STRUCTURES.get(
        session_type, SESSION_STRUCTURES[DEFAULT_SESSION_TYPE]
    )
    target_count = counts[experience.rank]

    selected = []
    used_ids = set()

    for muscle_group in muscle_groups:
        if len(selected) >= target_count:
            break

        candidates = [
            ex for ex in resolve_muscle_group(muscle_group, exercises)
            if ex.id not in used_ids
        ]
        candidates = rank_exercises(allowed_for(candidates, experience), experience)
        take = 2 if muscle_group in HIGH_VOLUME_GROUPS else 1

        for exercise in candidates[:take]:
            if len(selected) >= target_count:
                break
            selected.append(
                _make_routine_exercise(exercise, len(selected), goal, experience, with_notes=True)
            )
            used_ids.add(exercise.id)

    if len(selected) < target_count:
        remaining = [ex for ex in exercises if ex.id not in used_ids]
        for exercise in remaining[: target_count - len(selected)]:
            selected.append(
                _make_routine_exercise(exercise, len(selected), goal, experience, with_notes=False)
            )
            used_ids.add(exercise.id)

    return selected


def calculate_duration(routine_exercises):
    """
    Estimated session length in minutes.

    Per exercise: 5 minutes of setup, 2 minutes per set, plus the
    exercise's rest between consecutive sets.
    """
    total_minutes = 0.0
    for exercise in routine_exercises:
        set_count = len(exercise.sets)
        rest_minutes = (exercise.rest_time_seconds or DEFAULT_REST_SECONDS) / 60
        total_minutes += (
            MINUTES_PER_EXERCISE
            + rest_minutes * max(set_count - 1, 0)
            + MINUTES_PER_SET * set_count
        )
    return int(total_minutes + 0.5)


def _routine_tags(profile):
    equipment = list(profile.equipment[:2]) if profile.equipment else ["all-equipment"]
    return [
        f"{profile.days_per_week}-day",
        profile.experience.value,
        profile.goal.value.replace("_", "-"),
    ] + equipment


def generate_routine(profile, catalog, normalizer=None):
    """
    Build a complete Routine for ``profile`` from ``catalog``.

    An empty catalog yields a routine whose sessions hold no exercises.
    """
    template = split_template(profile.days_per_week)
    exercises = available_exercises(catalog.list_all(), profile.equipment, normalizer)
    logger.debug(
        "Generating %d-session routine from %d available exercises",
        len(template), len(exercises),
    )

    sessions = []
    for index, session_type in enumerate(template):
        session_exercises = generate_session_exercises(
            session_type, exercises, profile.goal, profile.experience
        )
        sessions.append(RoutineSession(
            id=f"session-{index + 1}",
            name=session_name(session_type, index),
            order=index + 1,
            exercises=session_exercises,
            estimated_duration_minutes=calculate_duration(session_exercises),
        ))

    days = profile.days_per_week
    return Routine(
        id=f"generated-{profile.goal.value}-{profile.experience.value}-{days}d",
        name=f"{profile.experience.value.capitalize()} {GOAL_NAMES[profile.goal]} {days}-Day Split",
        description=GOAL_DESCRIPTIONS[profile.goal].format(days=days),
        goal=ROUTINE_GOAL_LABELS[profile.goal],
        difficulty=DIFFICULTY_LABELS[profile.experience],
        tags=_routine_tags(profile),
        sessions=sessions,
        estimated_duration_minutes=sum(s.estimated_duration_minutes for s in sessions),
        created_by="generator",
    )
