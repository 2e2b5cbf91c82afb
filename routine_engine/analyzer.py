"""
Muscle-group coverage analysis for existing routines.

Walks every exercise in a routine, attributes working sets to each muscle
group the exercise trains, and turns the tallies into a prioritized list of
improvements plus a dedicated report for one focus muscle group.
"""

import logging
from collections import OrderedDict

from routine_engine.equipment import get_normalizer
from routine_engine.models import as_routine
from routine_engine.ranking import is_compound


logger = logging.getLogger(__name__)

MAJOR_MUSCLE_GROUPS = (
    "chest", "back", "shoulders", "legs", "glutes", "hamstrings",
    "quadriceps", "calves", "biceps", "triceps", "core",
)

# Recommended weekly working sets per muscle group
MIN_SETS_PER_WEEK = {
    "chest": 10,
    "back": 12,
    "shoulders": 10,
    "legs": 12,
    "glutes": 8,
    "hamstrings": 8,
    "quadriceps": 10,
    "calves": 6,
    "biceps": 6,
    "triceps": 6,
    "core": 8,
}
MAX_SETS_PER_WEEK = {
    "chest": 20,
    "back": 24,
    "shoulders": 18,
    "legs": 24,
    "glutes": 16,
    "hamstrings": 16,
    "quadriceps": 20,
    "calves": 12,
    "biceps": 14,
    "triceps": 14,
    "core": 16,
}
FALLBACK_MIN_SETS = 6
FALLBACK_MAX_SETS = 20

DEFAULT_REPS = 10
DEFAULT_REST_SECONDS = 60
COMPOUND_REST_FLOOR_SECONDS = 90
MIN_CORE_SETS = 6
MAX_SUGGESTIONS = 3

# Focus muscle group thresholds (total working sets)
FOCUS_EXCESSIVE_SETS = 6
FOCUS_SUFFICIENT_SETS = 3
FOCUS_SUFFICIENT_DIRECT_SETS = 2
MAX_FOCUS_SUGGESTIONS = 5

DEFAULT_FOCUS_MUSCLE_GROUP = "biceps"
DEFAULT_PREFERRED_EQUIPMENT = "dumbbells"

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

# Score deductions
MISSING_GROUP_PENALTY = 8
UNDERTRAINED_PENALTY = 5
OVERTRAINED_PENALTY = 3
INDIRECT_ONLY_PENALTY = 2
LOW_COMPOUND_RATIO_PENALTY = 10
LOW_CORE_PENALTY = 5
LOW_VARIETY_PENALTY = 5
SHORT_REST_PENALTY = 3
UNEVEN_VOLUME_PENALTY = 5
MISSING_MOVEMENTS_PENALTY = 8


def _empty_coverage(muscle_group):
    return {
        "muscle_group": muscle_group,
        "exercises": [],
        "direct_work": 0,
        "indirect_work": 0,
        "total_sets": 0,
        "total_volume": 0,
        "frequency": 0,
    }


def _suggestion(exercise, reason):
    return {
        "id": exercise.id,
        "name": exercise.name,
        "description": exercise.description,
        "difficulty": exercise.difficulty.value,
        "equipment": list(exercise.equipment),
        "reason": reason,
    }


def _improvement(category, priority, code, issue, recommendation,
                 muscle_group=None, suggested_exercises=None):
    return {
        "category": category,
        "priority": priority,
        "code": code,
        "issue": issue,
        "recommendation": recommendation,
        "muscle_group": muscle_group,
        "suggested_exercises": suggested_exercises or [],
    }


def _working_sets(routine_exercise):
    return routine_exercise.working_sets


def _average_reps(routine_exercise):
    working = _working_sets(routine_exercise)
    if not working:
        return DEFAULT_REPS
    return sum(s.target_reps or DEFAULT_REPS for s in working) / len(working)


def _routine_equipment(sessions, catalog):
    """Equipment tags already used by the routine, in first-seen order."""
    equipment = []
    for session in sessions:
        for routine_exercise in session.exercises:
            exercise = catalog.get_exercise_by_id(routine_exercise.exercise_id)
            if exercise is None:
                continue
            for tag in exercise.equipment:
                if tag not in equipment:
                    equipment.append(tag)
    return equipment


def suggest_exercises_for(muscle_group, catalog, equipment=None, limit=MAX_SUGGESTIONS,
                          reason=None):
    """
    Catalog exercises that train ``muscle_group`` as a primary target.

    When ``equipment`` is given, only exercises sharing at least one
    (normalized) equipment tag with it are returned.
    """
    normalizer = get_normalizer()
    wanted = normalizer.normalize_set(equipment or ())
    reason = reason or f"Targets {muscle_group} as primary muscle group"
    suggestions = []
    for exercise in catalog.list_all():
        if muscle_group not in exercise.primary_muscles:
            continue
        if wanted and not (normalizer.normalize_set(exercise.equipment) & wanted):
            continue
        suggestions.append(_suggestion(exercise, reason))
        if len(suggestions) >= limit:
            break
    return suggestions


def focus_recommendation(total_sets, has_direct_work):
    """Recommendation for the focus muscle group: add, sufficient or excessive."""
    if total_sets == 0 and not has_direct_work:
        return "add"
    if total_sets >= FOCUS_EXCESSIVE_SETS:
        return "excessive"
    if total_sets >= FOCUS_SUFFICIENT_SETS:
        return "sufficient"
    if has_direct_work and total_sets >= FOCUS_SUFFICIENT_DIRECT_SETS:
        return "sufficient"
    return "add"


def analyze_focus_group(sessions, catalog, muscle_group=DEFAULT_FOCUS_MUSCLE_GROUP,
                        preferred_equipment=DEFAULT_PREFERRED_EQUIPMENT):
    """Direct/indirect work, set total and recommendation for one muscle group."""
    direct = []
    indirect = []
    total_sets = 0

    for session in sessions:
        for routine_exercise in session.exercises:
            exercise = catalog.get_exercise_by_id(routine_exercise.exercise_id)
            if exercise is None:
                continue
            if muscle_group in exercise.primary_muscles:
                if exercise.name not in direct:
                    direct.append(exercise.name)
            elif muscle_group in exercise.secondary_muscles:
                if exercise.name not in indirect:
                    indirect.append(exercise.name)
            else:
                continue
            total_sets += len(_working_sets(routine_exercise))

    has_direct = bool(direct)
    recommendation = focus_recommendation(total_sets, has_direct)
    suggestions = []
    if recommendation == "add":
        suggestions = suggest_exercises_for(
            muscle_group,
            catalog,
            equipment=[preferred_equipment] if preferred_equipment else None,
            limit=MAX_FOCUS_SUGGESTIONS,
        )

    return {
        "muscle_group": muscle_group,
        "has_direct_work": has_direct,
        "has_indirect_work": bool(indirect),
        "direct_exercises": direct,
        "indirect_exercises": indirect,
        "total_sets": total_sets,
        "recommendation": recommendation,
        "suggested_exercises": suggestions,
    }


def _tally(sessions, catalog):
    """Per-muscle-group coverage, per-exercise analysis and per-session set counts."""
    coverage = OrderedDict()
    exercise_analysis = []
    sets_per_session = []

    for session_index, session in enumerate(sessions):
        session_sets = 0
        session_primary = set()

        for routine_exercise in session.exercises:
            exercise = catalog.get_exercise_by_id(routine_exercise.exercise_id)
            if exercise is None:
                logger.debug("Skipping unknown exercise id %r", routine_exercise.exercise_id)
                continue

            working_sets = len(_working_sets(routine_exercise))
            average_reps = _average_reps(routine_exercise)
            session_sets += working_sets

            for muscle_group in exercise.muscle_groups:
                entry = coverage.setdefault(muscle_group, _empty_coverage(muscle_group))
                if exercise.name not in entry["exercises"]:
                    entry["exercises"].append(exercise.name)
                entry["total_sets"] += working_sets
                entry["total_volume"] += working_sets * average_reps
                if muscle_group in exercise.primary_muscles:
                    entry["direct_work"] += 1
                else:
                    entry["indirect_work"] += 1

            for muscle_group in exercise.primary_muscles:
                if muscle_group not in session_primary:
                    session_primary.add(muscle_group)
                    coverage[muscle_group]["frequency"] += 1

            compound = is_compound(exercise)
            exercise_analysis.append({
                "exercise_id": exercise.id,
                "exercise_name": exercise.name,
                "session_index": session_index,
                "sets": working_sets,
                "average_reps": average_reps,
                "rest_time_seconds": routine_exercise.rest_time_seconds or DEFAULT_REST_SECONDS,
                "is_compound": compound,
                "muscle_groups": list(exercise.muscle_groups),
            })

        sets_per_session.append(session_sets)

    return coverage, exercise_analysis, sets_per_session


def _has_movement(records, predicate):
    return any(predicate(ex) for ex in records)


def _missing_movements(records):
    def primary(ex, tag):
        return tag in ex.primary_muscles

    checks = (
        ("squat", lambda ex: "squat" in ex.id or "squat" in ex.name.lower()
         or (primary(ex, "quadriceps") and primary(ex, "glutes"))),
        ("deadlift", lambda ex: "deadlift" in ex.id or "deadlift" in ex.name.lower()
         or (primary(ex, "back") and primary(ex, "hamstrings"))),
        ("bench press", lambda ex: "bench" in ex.id or "bench" in ex.name.lower()
         or primary(ex, "chest")),
        ("overhead press", lambda ex: "overhead" in ex.id or "overhead" in ex.name.lower()
         or "shoulder press" in ex.name.lower()
         or (primary(ex, "shoulders") and "press" in ex.id)),
        ("pull movement (rows or pull-ups)", lambda ex: "pull-up" in ex.id or "chin-up" in ex.id
         or "row" in ex.id or "row" in ex.name.lower() or "pull" in ex.name.lower()),
    )
    return [name for name, predicate in checks if not _has_movement(records, predicate)]


def analyze_routine(routine, catalog, focus_muscle_group=DEFAULT_FOCUS_MUSCLE_GROUP,
                    preferred_equipment=DEFAULT_PREFERRED_EQUIPMENT):
    """
    Analyze a routine's muscle-group coverage.

    Returns:
        dict with keys: routine_id, routine_name, muscle_groups,
        exercise_analysis, improvements, overall_score, strengths,
        weaknesses, overall_recommendations, focus_analysis
    """
    routine = as_routine(routine)
    sessions = routine.iter_sessions()
    coverage, exercise_analysis, sets_per_session = _tally(sessions, catalog)
    available_equipment = _routine_equipment(sessions, catalog)

    improvements = []
    strengths = []
    weaknesses = []
    score = 100

    # 1. Muscle group balance
    undertrained = []
    overtrained = []
    indirect_only = []
    for muscle_group in MAJOR_MUSCLE_GROUPS:
        entry = coverage.get(muscle_group)
        total_sets = entry["total_sets"] if entry else 0
        min_sets = MIN_SETS_PER_WEEK.get(muscle_group, FALLBACK_MIN_SETS)
        max_sets = MAX_SETS_PER_WEEK.get(muscle_group, FALLBACK_MAX_SETS)

        if total_sets == 0:
            undertrained.append(muscle_group)
            score -= MISSING_GROUP_PENALTY
        elif total_sets < min_sets:
            undertrained.append(muscle_group)
            score -= UNDERTRAINED_PENALTY
        elif total_sets > max_sets:
            overtrained.append(muscle_group)
            score -= OVERTRAINED_PENALTY
        else:
            strengths.append(f"{muscle_group} volume is well-balanced")

        if total_sets > 0 and not entry["direct_work"]:
            indirect_only.append(muscle_group)
            score -= INDIRECT_ONLY_PENALTY

    for muscle_group in undertrained:
        entry = coverage.get(muscle_group)
        current_sets = entry["total_sets"] if entry else 0
        min_sets = MIN_SETS_PER_WEEK.get(muscle_group, FALLBACK_MIN_SETS)
        needed_sets = min_sets - current_sets
        code = "missing" if current_sets == 0 else "undertrained"
        improvements.append(_improvement(
            "Muscle Group Balance",
            "high" if needed_sets >= 6 else "medium",
            code,
            f"{muscle_group.capitalize()} is {code} ({current_sets} sets/week, need {min_sets}+)",
            f"Add {needed_sets} more sets targeting {muscle_group}. "
            f"Consider adding 1-2 exercises that directly target {muscle_group}.",
            muscle_group=muscle_group,
            suggested_exercises=suggest_exercises_for(muscle_group, catalog, available_equipment),
        ))

    for muscle_group in overtrained:
        max_sets = MAX_SETS_PER_WEEK.get(muscle_group, FALLBACK_MAX_SETS)
        improvements.append(_improvement(
            "Volume Management",
            "medium",
            "overtrained",
            f"{muscle_group.capitalize()} may be overtrained "
            f"({coverage[muscle_group]['total_sets']} sets/week, max recommended {max_sets})",
            f"Consider reducing volume for {muscle_group} to prevent overtraining "
            f"and allow proper recovery.",
            muscle_group=muscle_group,
        ))

    for muscle_group in indirect_only:
        improvements.append(_improvement(
            "Exercise Selection",
            "low",
            "indirect_only",
            f"{muscle_group.capitalize()} only receives indirect work",
            f"Add at least one exercise that directly targets {muscle_group} for optimal development.",
            muscle_group=muscle_group,
        ))

    # 2. Compound vs isolation balance
    if exercise_analysis:
        compound_count = sum(1 for ex in exercise_analysis if ex["is_compound"])
        compound_ratio = compound_count / len(exercise_analysis)
        if compound_ratio < 0.5:
            score -= LOW_COMPOUND_RATIO_PENALTY
            improvements.append(_improvement(
                "Exercise Selection",
                "high",
                "low_compound_ratio",
                f"Low compound exercise ratio ({round(compound_ratio * 100)}%)",
                "Increase compound movements. Aim for at least 50% compound exercises.",
            ))
            weaknesses.append("Too many isolation exercises")
        else:
            strengths.append("Good compound exercise ratio")

    # 3. Core work
    core_sets = coverage["core"]["total_sets"] if "core" in coverage else 0
    if core_sets < MIN_CORE_SETS:
        score -= LOW_CORE_PENALTY
        improvements.append(_improvement(
            "Core Training",
            "medium",
            "core_insufficient",
            f"Insufficient core work ({core_sets} sets/week, recommend 8+)",
            "Add dedicated core exercises. A strong core improves performance in all lifts.",
            suggested_exercises=suggest_exercises_for(
                "core", catalog, available_equipment,
                reason="Essential for stability and overall strength",
            ),
        ))
    else:
        strengths.append("Adequate core training")

    # 4. Exercise variety
    if sessions:
        unique_exercises = {ex["exercise_id"] for ex in exercise_analysis}
        variety_score = min(100, len(unique_exercises) / len(sessions) * 20)
        if variety_score < 60:
            score -= LOW_VARIETY_PENALTY
            improvements.append(_improvement(
                "Exercise Variety",
                "medium",
                "low_variety",
                f"Low exercise variety ({len(unique_exercises)} unique exercises "
                f"across {len(sessions)} sessions)",
                "Add more exercise variety to prevent plateaus. "
                "Consider rotating exercises every 4-6 weeks.",
            ))
            weaknesses.append("Limited exercise variety")
        else:
            strengths.append("Good exercise variety")

    # 5. Rest periods
    short_rest = [
        ex for ex in exercise_analysis
        if ex["is_compound"] and ex["rest_time_seconds"] < COMPOUND_REST_FLOOR_SECONDS
    ]
    if short_rest:
        score -= SHORT_REST_PENALTY
        improvements.append(_improvement(
            "Recovery",
            "low",
            "short_compound_rest",
            "Some compound exercises have short rest periods (<90s)",
            "Compound exercises typically need 90-180s rest. "
            "Consider increasing rest time for heavy compound movements.",
        ))

    # 6. Volume distribution across sessions
    if sets_per_session:
        average = sum(sets_per_session) / len(sets_per_session)
        lowest = min(sets_per_session)
        highest = max(sets_per_session)
        if highest - lowest > average * 0.5:
            score -= UNEVEN_VOLUME_PENALTY
            improvements.append(_improvement(
                "Volume Distribution",
                "medium",
                "uneven_volume",
                f"Uneven volume distribution across sessions ({lowest}-{highest} sets per session)",
                "Balance volume across sessions for consistent training stimulus and better recovery.",
            ))
            weaknesses.append("Uneven session volume")
        else:
            strengths.append("Well-distributed volume")

    # 7. Essential movement patterns
    records = [catalog.get_exercise_by_id(ex["exercise_id"]) for ex in exercise_analysis]
    missing = _missing_movements(records)
    if missing:
        score -= MISSING_MOVEMENTS_PENALTY
        improvements.append(_improvement(
            "Essential Movements",
            "high",
            "missing_movements",
            f"Missing essential movement patterns: {', '.join(missing)}",
            "Include fundamental movement patterns (squat, hinge, push, pull) "
            "for comprehensive strength development.",
        ))
        weaknesses.append("Missing essential movement patterns")
    else:
        strengths.append("Includes essential movement patterns")

    if score >= 85:
        overall = ["Your routine is well-structured! Continue progressive overload."]
    elif score >= 70:
        overall = ["Good routine with room for improvement. Focus on the high-priority suggestions."]
    else:
        overall = ["Routine needs significant improvements. Address high-priority issues first."]

    improvements.sort(key=lambda imp: PRIORITY_ORDER[imp["priority"]])
    score = max(0, min(100, score))

    return {
        "routine_id": routine.id,
        "routine_name": routine.name,
        "muscle_groups": sorted(coverage.values(), key=lambda c: c["total_sets"], reverse=True),
        "exercise_analysis": exercise_analysis,
        "improvements": improvements,
        "overall_score": int(round(score)),
        "strengths": strengths or ["Routine structure is solid"],
        "weaknesses": weaknesses or ["No major weaknesses identified"],
        "overall_recommendations": overall,
        "focus_analysis": analyze_focus_group(
            sessions, catalog, focus_muscle_group, preferred_equipment
        ),
    }


def analyze_routines(routines, catalog, **kwargs):
    return [analyze_routine(routine, catalog, **kwargs) for routine in routines]


def format_analysis_report(analysis):
    """Render an analysis dict as a plain-text report."""
    lines = [
        f"ROUTINE ANALYSIS: {analysis['routine_name'] or analysis['routine_id'] or 'Untitled'}",
        "=" * 60,
        f"OVERALL SCORE: {analysis['overall_score']}/100",
        "",
        "STRENGTHS:",
    ]
    lines.extend(f"  - {s}" for s in analysis["strengths"])
    lines.append("")
    lines.append("WEAKNESSES:")
    lines.extend(f"  - {w}" for w in analysis["weaknesses"])
    lines.append("")

    lines.append("MUSCLE GROUP COVERAGE:")
    for entry in analysis["muscle_groups"][:15]:
        minimum = MIN_SETS_PER_WEEK.get(entry["muscle_group"], FALLBACK_MIN_SETS)
        status = "✓" if entry["total_sets"] >= minimum else "⚠"
        work_type = "Direct" if entry["direct_work"] else "Indirect"
        lines.append(
            f"  {status} {entry['muscle_group']}: {entry['total_sets']} sets "
            f"({work_type}, {entry['frequency']}x/week)"
        )
    lines.append("")

    focus = analysis["focus_analysis"]
    lines.append(f"{focus['muscle_group'].upper()}: {focus['total_sets']} sets, "
                 f"recommendation: {focus['recommendation']}")
    for suggestion in focus["suggested_exercises"]:
        lines.append(f"  + {suggestion['name']} ({suggestion['difficulty']})")
    lines.append("")

    if analysis["improvements"]:
        lines.append("IMPROVEMENT SUGGESTIONS:")
        for improvement in analysis["improvements"]:
            lines.append(f"  [{improvement['priority'].upper()}] {improvement['category']}: "
                         f"{improvement['issue']}")
            lines.append(f"      {improvement['recommendation']}")
            for index, suggestion in enumerate(improvement["suggested_exercises"], start=1):
                lines.append(f"      {index}. {suggestion['name']} ({suggestion['difficulty']})")
        lines.append("")

    lines.extend(analysis["overall_recommendations"])
    return "\n".join(lines)
