import os
import tempfile
import unittest

from routine_engine.catalog import ExerciseCatalog, load_catalog
from routine_engine.models import Category, ExerciseRecord


class BundledCatalogTests(unittest.TestCase):
    def setUp(self):
        self.catalog = load_catalog()

    def test_lookup_by_id(self):
        bench = self.catalog.get_exercise_by_id("bench-press")
        self.assertEqual(bench.name, "Bench Press")
        self.assertIn("chest", bench.primary_muscles)
        self.assertIsNone(self.catalog.get_exercise_by_id("does-not-exist"))
        self.assertIn("squat", self.catalog)

    def test_search_matches_name_and_tags_case_insensitively(self):
        by_name = {ex.id for ex in self.catalog.search_exercises("CURL")}
        self.assertEqual(by_name, {"bicep-curls", "hammer-curls", "leg-curl"})

        by_tag = {ex.id for ex in self.catalog.search_exercises("biceps")}
        self.assertIn("chin-ups", by_tag)
        self.assertIn("barbell-row", by_tag)

    def test_empty_search_returns_everything(self):
        self.assertEqual(len(self.catalog.search_exercises("")), len(self.catalog))

    def test_category_and_equipment_filters(self):
        cardio = {ex.id for ex in self.catalog.get_exercises_by_category("cardio")}
        self.assertEqual(cardio, {"running", "cycling", "jumping-jacks"})
        cable = {ex.id for ex in self.catalog.get_exercises_by_equipment("cable")}
        self.assertEqual(cable, {"lat-pulldown", "tricep-pushdown"})
        core = {ex.id for ex in self.catalog.get_exercises_by_muscle_group("core")}
        self.assertIn("plank", core)
        self.assertIn("deadlift", core)


class CatalogConstructionTests(unittest.TestCase):
    def test_first_duplicate_id_wins(self):
        first = ExerciseRecord("a", "First", Category.STRENGTH, ("chest",), (), (), "beginner")
        second = ExerciseRecord("a", "Second", Category.STRENGTH, ("back",), (), (), "beginner")
        catalog = ExerciseCatalog([first, second])
        self.assertEqual(catalog.get_exercise_by_id("a").name, "First")

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            load_catalog("/nonexistent/exercises.yaml")

    def test_file_without_exercise_list_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "catalog.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("exercises: not-a-list\n")
            with self.assertRaises(ValueError):
                load_catalog(path)

    def test_loads_custom_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "catalog.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write(
                    "exercises:\n"
                    "  - id: goblet-squat\n"
                    "    name: Goblet Squat\n"
                    "    muscle_groups: {primary: [quadriceps], secondary: [core]}\n"
                    "    equipment: [kettlebell]\n"
                )
            catalog = load_catalog(path)
            self.assertEqual(len(catalog), 1)
            self.assertEqual(catalog.list_all()[0].category, Category.OTHER)


if __name__ == "__main__":
    unittest.main()
