"""
Substitute-exercise scoring.
"""

from routine_engine.equipment import get_normalizer


PRIMARY_OVERLAP_POINTS = 10
SECONDARY_OVERLAP_POINTS = 5
CROSS_OVERLAP_POINTS = 3
CATEGORY_MATCH_POINTS = 5
DIFFICULTY_MATCH_POINTS = 3
EQUIPMENT_OVERLAP_POINTS = 2
SHARED_EQUIPMENT_BONUS = 5


def similarity_score(reference, candidate, normalizer=None):
    """Integer substitution score of ``candidate`` against ``reference``."""
    normalizer = normalizer or get_normalizer()
    ref_primary = set(reference.primary_muscles)
    ref_secondary = set(reference.secondary_muscles)
    cand_primary = set(candidate.primary_muscles)
    cand_secondary = set(candidate.secondary_muscles)

    score = PRIMARY_OVERLAP_POINTS * len(ref_primary & cand_primary)
    score += SECONDARY_OVERLAP_POINTS * len(ref_secondary & cand_secondary)
    score += CROSS_OVERLAP_POINTS * (
        len(ref_primary & cand_secondary) + len(ref_secondary & cand_primary)
    )

    if reference.category == candidate.category:
        score += CATEGORY_MATCH_POINTS
    if reference.difficulty == candidate.difficulty:
        score += DIFFICULTY_MATCH_POINTS

    shared_equipment = (
        normalizer.normalize_set(reference.equipment)
        & normalizer.normalize_set(candidate.equipment)
    )
    if shared_equipment:
        score += EQUIPMENT_OVERLAP_POINTS * len(shared_equipment) + SHARED_EQUIPMENT_BONUS
    return score


def score_similar_exercises(exercise_id, catalog, limit=5, normalizer=None):
    """
    ``(record, score)`` pairs for the best substitutes of ``exercise_id``.

    Sorted by descending score; ties keep catalog order. Unknown ids give [].
    """
    reference = catalog.get_exercise_by_id(exercise_id)
    if reference is None or limit <= 0:
        return []

    normalizer = normalizer or get_normalizer()
    scored = [
        (candidate, similarity_score(reference, candidate, normalizer))
        for candidate in catalog.list_all()
        if candidate.id != reference.id
    ]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:limit]


def find_similar_exercises(exercise_id, catalog, limit=5, normalizer=None):
    pairs = score_similar_exercises(exercise_id, catalog, limit, normalizer)
    return [record for record, _ in pairs]
