"""
Rule-based workout routine generation, analysis and improvement.
"""

from routine_engine.engine import (
    RoutineEngine,
    analyze_routine,
    find_similar_exercises,
    generate_routine,
    get_engine,
    improve_routine,
    preview_improvements,
    reset_engine,
)

__all__ = [
    "RoutineEngine",
    "analyze_routine",
    "find_similar_exercises",
    "generate_routine",
    "get_engine",
    "improve_routine",
    "preview_improvements",
    "reset_engine",
]
