import unittest

from routine_engine.analyzer import (
    analyze_routine,
    focus_recommendation,
    format_analysis_report,
)
from routine_engine.catalog import load_catalog
from routine_engine.equipment import get_normalizer
from routine_engine.generator import generate_routine
from routine_engine.models import Goal, Level, UserProfile


def _sets(count, reps=10, set_type="working", rest=60):
    return [{"set_type": set_type, "target_reps": reps, "rest_after_seconds": rest} for _ in range(count)]


def _exercise(exercise_id, order, sets, rest=60):
    return {"exercise_id": exercise_id, "order": order, "sets": sets, "rest_time_seconds": rest}


def _routine(*sessions):
    return {
        "id": "test-routine",
        "name": "Test Routine",
        "sessions": [
            {"id": f"s{i}", "name": f"Day {i + 1}", "order": i, "exercises": exercises}
            for i, exercises in enumerate(sessions)
        ],
    }


class CoverageTests(unittest.TestCase):
    def setUp(self):
        self.catalog = load_catalog()

    def test_warmups_do_not_count(self):
        routine = _routine([
            _exercise("bicep-curls", 0, _sets(1, set_type="warmup") + _sets(3) + _sets(1, set_type="drop")),
        ])
        analysis = analyze_routine(routine, self.catalog)
        biceps = next(c for c in analysis["muscle_groups"] if c["muscle_group"] == "biceps")
        self.assertEqual(biceps["total_sets"], 4)
        self.assertEqual(biceps["direct_work"], 1)
        self.assertEqual(biceps["indirect_work"], 0)
        self.assertEqual(biceps["total_volume"], 40)
        self.assertEqual(biceps["frequency"], 1)
        self.assertEqual(biceps["exercises"], ["Bicep Curls"])

    def test_primary_and_secondary_tags_both_count(self):
        routine = _routine([_exercise("bench-press", 0, _sets(3))], [_exercise("bench-press", 0, _sets(2))])
        analysis = analyze_routine(routine, self.catalog)
        by_tag = {c["muscle_group"]: c for c in analysis["muscle_groups"]}
        self.assertEqual(by_tag["chest"]["total_sets"], 5)
        self.assertEqual(by_tag["chest"]["frequency"], 2)
        self.assertEqual(by_tag["triceps"]["total_sets"], 5)
        self.assertEqual(by_tag["triceps"]["indirect_work"], 2)
        self.assertEqual(by_tag["triceps"]["frequency"], 0)
        totals = [c["total_sets"] for c in analysis["muscle_groups"]]
        self.assertEqual(totals, sorted(totals, reverse=True))

    def test_unknown_exercise_ids_are_skipped(self):
        routine = _routine([_exercise("moon-squat", 0, _sets(3))])
        analysis = analyze_routine(routine, self.catalog)
        self.assertEqual(analysis["muscle_groups"], [])
        self.assertEqual(analysis["exercise_analysis"], [])

    def test_legacy_flat_routine(self):
        routine = {
            "id": "legacy",
            "exercises": [
                {
                    "exerciseId": "squat",
                    "order": 0,
                    "restTime": 120,
                    "sets": [{"setType": "working", "targetReps": 5} for _ in range(3)],
                }
            ],
        }
        analysis = analyze_routine(routine, self.catalog)
        by_tag = {c["muscle_group"]: c for c in analysis["muscle_groups"]}
        self.assertEqual(by_tag["quadriceps"]["total_sets"], 3)
        self.assertEqual(by_tag["quadriceps"]["total_volume"], 15)
        self.assertEqual(analysis["exercise_analysis"][0]["rest_time_seconds"], 120)


class ImprovementTests(unittest.TestCase):
    def setUp(self):
        self.catalog = load_catalog()

    def test_undertrained_priorities_and_suggestions(self):
        routine = _routine([_exercise("bicep-curls", 0, _sets(4))])
        analysis = analyze_routine(routine, self.catalog)
        by_group = {
            imp["muscle_group"]: imp
            for imp in analysis["improvements"]
            if imp["code"] in ("missing", "undertrained")
        }

        self.assertEqual(by_group["biceps"]["code"], "undertrained")
        self.assertEqual(by_group["biceps"]["priority"], "medium")
        self.assertEqual(by_group["chest"]["code"], "missing")
        self.assertEqual(by_group["chest"]["priority"], "high")
        # filtered by the equipment the routine already uses (dumbbells, barbell)
        self.assertEqual(
            [s["id"] for s in by_group["chest"]["suggested_exercises"]],
            ["bench-press", "dumbbell-flyes", "dumbbell-bench-press"],
        )

    def test_improvements_sorted_by_priority(self):
        routine = _routine([_exercise("bicep-curls", 0, _sets(4))])
        analysis = analyze_routine(routine, self.catalog)
        order = {"high": 0, "medium": 1, "low": 2}
        ranks = [order[imp["priority"]] for imp in analysis["improvements"]]
        self.assertEqual(ranks, sorted(ranks))

    def test_short_compound_rest_flagged(self):
        routine = _routine([_exercise("squat", 0, _sets(3), rest=60)])
        codes = {imp["code"] for imp in analyze_routine(routine, self.catalog)["improvements"]}
        self.assertIn("short_compound_rest", codes)

        routine = _routine([_exercise("squat", 0, _sets(3), rest=120)])
        codes = {imp["code"] for imp in analyze_routine(routine, self.catalog)["improvements"]}
        self.assertNotIn("short_compound_rest", codes)

    def test_overtrained_group(self):
        routine = _routine([_exercise("hammer-curls", 0, _sets(15))])
        analysis = analyze_routine(routine, self.catalog)
        overtrained = [imp for imp in analysis["improvements"] if imp["code"] == "overtrained"]
        self.assertEqual([imp["muscle_group"] for imp in overtrained], ["biceps"])

    def test_empty_routine_score_clamps_to_zero(self):
        analysis = analyze_routine({}, self.catalog)
        self.assertEqual(analysis["overall_score"], 0)
        self.assertEqual(analysis["muscle_groups"], [])
        self.assertIn("missing_movements", {imp["code"] for imp in analysis["improvements"]})

    def test_generated_routine_score_in_range(self):
        profile = UserProfile(Goal.MUSCLE_GAIN, Level.INTERMEDIATE, 4, ())
        analysis = analyze_routine(generate_routine(profile, self.catalog), self.catalog)
        self.assertGreaterEqual(analysis["overall_score"], 0)
        self.assertLessEqual(analysis["overall_score"], 100)
        self.assertTrue(analysis["strengths"])
        self.assertEqual(len(analysis["overall_recommendations"]), 1)


class FocusAnalysisTests(unittest.TestCase):
    def setUp(self):
        self.catalog = load_catalog()

    def test_no_biceps_work_recommends_dumbbell_exercises(self):
        routine = _routine([_exercise("squat", 0, _sets(3)), _exercise("plank", 1, _sets(3))])
        focus = analyze_routine(routine, self.catalog)["focus_analysis"]

        self.assertEqual(focus["muscle_group"], "biceps")
        self.assertFalse(focus["has_direct_work"])
        self.assertFalse(focus["has_indirect_work"])
        self.assertEqual(focus["total_sets"], 0)
        self.assertEqual(focus["recommendation"], "add")
        self.assertTrue(focus["suggested_exercises"])
        normalizer = get_normalizer()
        for suggestion in focus["suggested_exercises"]:
            self.assertIn("dumbbells", normalizer.normalize_set(suggestion["equipment"]))

    def test_indirect_work_counts_toward_total(self):
        routine = _routine([_exercise("barbell-row", 0, _sets(3))])
        focus = analyze_routine(routine, self.catalog)["focus_analysis"]
        self.assertEqual(focus["indirect_exercises"], ["Barbell Row"])
        self.assertEqual(focus["total_sets"], 3)
        self.assertEqual(focus["recommendation"], "sufficient")
        self.assertEqual(focus["suggested_exercises"], [])

    def test_configurable_focus_group(self):
        routine = _routine([_exercise("tricep-pushdown", 0, _sets(8))])
        focus = analyze_routine(routine, self.catalog, focus_muscle_group="triceps")["focus_analysis"]
        self.assertEqual(focus["direct_exercises"], ["Tricep Pushdown"])
        self.assertEqual(focus["recommendation"], "excessive")

    def test_recommendation_thresholds(self):
        self.assertEqual(focus_recommendation(0, False), "add")
        self.assertEqual(focus_recommendation(1, False), "add")
        self.assertEqual(focus_recommendation(2, False), "add")
        self.assertEqual(focus_recommendation(2, True), "sufficient")
        self.assertEqual(focus_recommendation(3, False), "sufficient")
        self.assertEqual(focus_recommendation(6, True), "excessive")


class ReportTests(unittest.TestCase):
    def test_report_mentions_score_and_suggestions(self):
        catalog = load_catalog()
        routine = _routine([_exercise("squat", 0, _sets(3))])
        report = format_analysis_report(analyze_routine(routine, catalog))
        self.assertIn("ROUTINE ANALYSIS: Test Routine", report)
        self.assertIn("OVERALL SCORE:", report)
        self.assertIn("[HIGH]", report)
        self.assertIn("BICEPS: 0 sets, recommendation: add", report)


if __name__ == "__main__":
    unittest.main()
