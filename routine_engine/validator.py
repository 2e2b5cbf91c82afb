"""
Structural checks for routines.
"""


def _add_violation(violations, code, message, session=None, exercise=None):
    violations.append(
        {
            "code": code,
            "message": message,
            "session": session or "",
            "exercise": exercise or "",
        }
    )


def validate_routine(routine, catalog):
    """
    Check a routine's structure against the catalog.

    Reports sessions whose exercise order is not a dense 0..n-1 sequence,
    exercise ids missing from the catalog, and exercises without sets.

    Returns:
        dict with keys: violations, summary
    """
    violations = []
    checked = 0

    for session in routine.iter_sessions():
        label = session.name or session.id
        orders = sorted(ex.order for ex in session.exercises)
        if orders != list(range(len(orders))):
            _add_violation(
                violations,
                "order_not_dense",
                f"Exercise order is not a dense 0..{len(orders) - 1} sequence: {orders}",
                session=label,
            )

        for routine_exercise in session.exercises:
            checked += 1
            if catalog.get_exercise_by_id(routine_exercise.exercise_id) is None:
                _add_violation(
                    violations,
                    "unknown_exercise",
                    f"Exercise id not found in catalog: {routine_exercise.exercise_id}",
                    session=label,
                    exercise=routine_exercise.exercise_id,
                )
            if not routine_exercise.sets:
                _add_violation(
                    violations,
                    "empty_sets",
                    "Exercise has no sets.",
                    session=label,
                    exercise=routine_exercise.exercise_id,
                )

    summary = (
        f"Validation: {checked} exercises checked, {len(violations)} violation(s)."
        if checked
        else "Validation: routine has no exercises."
    )

    return {
        "violations": violations,
        "summary": summary,
    }
