"""
Automatic routine improvement.

Applies the analyzer's findings to a copy of a routine: compound lifts get at
least the rest floor, and undertrained muscle groups get one suggested
exercise each.
"""

import copy
import logging
from datetime import datetime, timezone

from routine_engine.analyzer import analyze_routine
from routine_engine.models import RoutineExercise, RoutineSession, SetConfiguration, SetType, as_routine
from routine_engine.ranking import is_compound


logger = logging.getLogger(__name__)

COMPOUND_REST_FLOOR_SECONDS = 90
MINUTES_PER_EXERCISE = 5

DEFAULT_SESSION_ID = "session-1"
DEFAULT_SESSION_NAME = "Workout Day"

# Improvement codes whose muscle group gets a new exercise
ADDABLE_CODES = ("missing", "undertrained")
ADDABLE_PRIORITIES = ("high", "medium")

# (sets, reps, rest seconds) for added exercises
CORE_SCHEME = (3, 12, 45)
COMPOUND_SCHEME = (3, 8, 90)
ISOLATION_SCHEME = (3, 10, 60)


def _change(change_type, description, details):
    return {"type": change_type, "description": description, "details": details}


def _scheme_for(exercise):
    if "core" in exercise.primary_muscles:
        return CORE_SCHEME
    if is_compound(exercise):
        return COMPOUND_SCHEME
    return ISOLATION_SCHEME


def adjust_rest_times(routine, catalog, floor=COMPOUND_REST_FLOOR_SECONDS):
    """Raise rest on compound exercises below ``floor``. Mutates ``routine``."""
    changes = []
    for session in routine.iter_sessions():
        for routine_exercise in session.exercises:
            exercise = catalog.get_exercise_by_id(routine_exercise.exercise_id)
            if exercise is None or not is_compound(exercise):
                continue
            old_rest = routine_exercise.rest_time_seconds
            if not old_rest or old_rest >= floor:
                continue

            routine_exercise.rest_time_seconds = floor
            for set_config in routine_exercise.sets:
                if set_config.rest_after_seconds and set_config.rest_after_seconds < floor:
                    set_config.rest_after_seconds = floor
            changes.append(_change(
                "rest_adjusted",
                f"Increased rest time for {exercise.name} from {old_rest}s to {floor}s",
                {"exercise_id": exercise.id, "old_rest": old_rest, "new_rest": floor},
            ))
    return changes


def find_best_session(sessions, muscle_group, catalog):
    """
    Session that should receive a new exercise for ``muscle_group``.

    Sessions already training the group (3 points per primary hit, 1 per
    secondary) come first; ties go to the session with fewer exercises.
    """
    if not sessions:
        return None

    def score(session):
        total = 0
        for routine_exercise in session.exercises:
            exercise = catalog.get_exercise_by_id(routine_exercise.exercise_id)
            if exercise is None:
                continue
            if muscle_group in exercise.primary_muscles:
                total += 3
            elif muscle_group in exercise.secondary_muscles:
                total += 1
        return total

    ranked = sorted(
        sessions,
        key=lambda s: (0 if score(s) > 0 else 1, len(s.exercises)),
    )
    return ranked[0]


def add_exercise_to_session(session, exercise_id, sets, reps, rest_seconds):
    next_order = max((ex.order for ex in session.exercises), default=-1) + 1
    routine_exercise = RoutineExercise(
        exercise_id=exercise_id,
        order=next_order,
        sets=[
            SetConfiguration(set_type=SetType.WORKING, target_reps=reps, rest_after_seconds=rest_seconds)
            for _ in range(sets)
        ],
        rest_time_seconds=rest_seconds,
    )
    session.exercises.append(routine_exercise)
    return routine_exercise


def add_missing_exercises(routine, improvements, catalog):
    """Add one suggested exercise per undertrained muscle group. Mutates ``routine``."""
    if not routine.sessions:
        # Legacy flat exercises move into the default session
        legacy = sorted(routine.exercises, key=lambda ex: ex.order)
        for order, routine_exercise in enumerate(legacy):
            routine_exercise.order = order
        routine.sessions = [
            RoutineSession(id=DEFAULT_SESSION_ID, name=DEFAULT_SESSION_NAME, order=0, exercises=legacy)
        ]
        routine.exercises = []

    changes = []
    handled = set()
    for improvement in improvements:
        muscle_group = improvement.get("muscle_group")
        if (
            improvement.get("code") not in ADDABLE_CODES
            or improvement.get("priority") not in ADDABLE_PRIORITIES
            or not improvement.get("suggested_exercises")
            or not muscle_group
            or muscle_group in handled
        ):
            continue

        suggestion = improvement["suggested_exercises"][0]
        exercise = catalog.get_exercise_by_id(suggestion["id"])
        if exercise is None:
            continue

        session = find_best_session(routine.sessions, muscle_group, catalog)
        if any(ex.exercise_id == exercise.id for ex in session.exercises):
            logger.debug("%s already in %s, not adding it for %s", exercise.id, session.name, muscle_group)
            continue
        sets, reps, rest_seconds = _scheme_for(exercise)
        add_exercise_to_session(session, exercise.id, sets, reps, rest_seconds)
        handled.add(muscle_group)

        changes.append(_change(
            "exercise_added",
            f"Added {exercise.name} to {session.name} ({sets} sets x {reps} reps)",
            {
                "exercise_id": exercise.id,
                "exercise_name": exercise.name,
                "session_id": session.id,
                "session_name": session.name,
                "sets": sets,
                "reps": reps,
                "reason": improvement["issue"],
            },
        ))
    return changes


def _transform(routine, catalog, analysis_options, rest_floor):
    """Clone ``routine`` and run both improvement passes on the clone."""
    working = copy.deepcopy(as_routine(routine))
    analysis = analyze_routine(working, catalog, **analysis_options)
    changes = adjust_rest_times(working, catalog, rest_floor)
    changes.extend(add_missing_exercises(working, analysis["improvements"], catalog))
    return working, changes


def summarize_changes(changes):
    added = sum(1 for c in changes if c["type"] == "exercise_added")
    adjusted = sum(1 for c in changes if c["type"] == "rest_adjusted")
    parts = []
    if added:
        parts.append(f"{added} exercise(s) added")
    if adjusted:
        parts.append(f"{adjusted} rest time(s) adjusted")
    return f"Applied {len(changes)} improvement(s): " + ", ".join(parts)


def improve_routine(routine, catalog, rest_floor=COMPOUND_REST_FLOOR_SECONDS, now=None,
                    **analysis_options):
    """
    Improve a routine based on its coverage analysis.

    The caller's routine is never modified.

    Returns:
        dict with keys: routine (the improved copy), changes, summary
    """
    improved, changes = _transform(routine, catalog, analysis_options, rest_floor)

    for session in improved.sessions:
        session.estimated_duration_minutes = len(session.exercises) * MINUTES_PER_EXERCISE
    improved.estimated_duration_minutes = sum(s.estimated_duration_minutes for s in improved.sessions)
    improved.updated_at = now or datetime.now(timezone.utc)

    summary = summarize_changes(changes)
    logger.debug("Improved routine %r: %s", improved.id, summary)
    return {"routine": improved, "changes": changes, "summary": summary}


def preview_improvements(routine, catalog, rest_floor=COMPOUND_REST_FLOOR_SECONDS, **analysis_options):
    """Changes ``improve_routine`` would make, without returning a routine."""
    _, changes = _transform(routine, catalog, analysis_options, rest_floor)
    return changes
