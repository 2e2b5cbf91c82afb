#!/usr/bin/env python3
"""
Workout Routine Engine
Command-line entry point: generate, compare, analyze and improve routines.
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from routine_engine.analyzer import format_analysis_report
from routine_engine.config import load_config
from routine_engine.engine import RoutineEngine


def print_banner():
    """Print welcome banner."""
    banner = """
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║        WORKOUT ROUTINE ENGINE                                ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
    """
    print(banner)


def print_section(title):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def load_routine_file(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(data, output_path=None):
    text = json.dumps(data, indent=2, default=str)
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"✓ Saved to {output_path}")
    else:
        print(text)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Rule-based workout routine engine.")
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--quiet", action="store_true", help="Skip the banner.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a routine from a profile.")
    generate.add_argument("--goal", required=True, help="strength, gain_muscle, lose_weight, ...")
    generate.add_argument("--experience", required=True, help="beginner, intermediate or advanced.")
    generate.add_argument("--days", type=int, default=3, help="Training days per week.")
    generate.add_argument("--equipment", nargs="*", default=[], help="Available equipment tags.")
    generate.add_argument("--output", type=str, default=None, help="Write routine JSON here.")

    similar = subparsers.add_parser("similar", help="Find substitutes for an exercise.")
    similar.add_argument("exercise_id")
    similar.add_argument("--limit", type=int, default=None)

    search = subparsers.add_parser("search", help="Search the exercise catalog.")
    search.add_argument("query")

    analyze = subparsers.add_parser("analyze", help="Analyze a routine JSON file.")
    analyze.add_argument("routine")
    analyze.add_argument("--json", action="store_true", help="Print the raw analysis as JSON.")

    improve = subparsers.add_parser("improve", help="Improve a routine JSON file.")
    improve.add_argument("routine")
    improve.add_argument("--output", type=str, default=None, help="Write improved routine JSON here.")

    preview = subparsers.add_parser("preview", help="List the changes 'improve' would make.")
    preview.add_argument("routine")

    return parser.parse_args(argv)


def run_generate(engine, args):
    routine = engine.generate_routine({
        "goal": args.goal,
        "experience": args.experience,
        "days_per_week": args.days,
        "equipment": args.equipment,
    })
    print_section(routine.name.upper())
    for session in routine.sessions:
        print(f"\n{session.name} (~{session.estimated_duration_minutes} min)")
        for routine_exercise in session.exercises:
            exercise = engine.catalog.get_exercise_by_id(routine_exercise.exercise_id)
            working = routine_exercise.working_sets
            reps = working[0].target_reps if working else "-"
            print(f"  {routine_exercise.order + 1}. {exercise.name if exercise else routine_exercise.exercise_id}"
                  f" - {len(working)} x {reps}, rest {routine_exercise.rest_time_seconds}s")
    if args.output:
        write_json(routine.to_dict(), args.output)
    return 0


def run_similar(engine, args):
    results = engine.find_similar_exercises(args.exercise_id, args.limit)
    if not results:
        print(f"\n❌ No similar exercises found for '{args.exercise_id}'.")
        return 1
    print_section(f"SIMILAR TO {args.exercise_id.upper()}")
    for index, exercise in enumerate(results, start=1):
        print(f"  {index}. {exercise.name} [{exercise.id}]")
    return 0


def run_search(engine, args):
    results = engine.search_exercises(args.query)
    print_section(f"SEARCH: {args.query}")
    for exercise in results:
        print(f"  - {exercise.name} [{exercise.id}] ({', '.join(exercise.primary_muscles)})")
    print(f"\n{len(results)} exercise(s) found.")
    return 0


def run_analyze(engine, args):
    analysis = engine.analyze_routine(load_routine_file(args.routine))
    if args.json:
        write_json(analysis)
    else:
        print(format_analysis_report(analysis))
    return 0


def run_improve(engine, args):
    result = engine.improve_routine(load_routine_file(args.routine))
    print_section("IMPROVEMENTS")
    for change in result["changes"]:
        print(f"  ✓ {change['description']}")
    print(f"\n{result['summary']}")
    if args.output:
        write_json(result["routine"].to_dict(), args.output)
    return 0


def run_preview(engine, args):
    changes = engine.preview_improvements(load_routine_file(args.routine))
    print_section("PREVIEW")
    if not changes:
        print("  No changes suggested.")
    for change in changes:
        print(f"  - {change['description']}")
    return 0


COMMANDS = {
    "generate": run_generate,
    "similar": run_similar,
    "search": run_search,
    "analyze": run_analyze,
    "improve": run_improve,
    "preview": run_preview,
}


def main(argv=None):
    """Main application flow."""
    args = parse_args(argv)

    # Load environment variables (ROUTINE_ENGINE_CONFIG may live in .env)
    load_dotenv()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.quiet:
        print_banner()

    config = load_config(args.config)
    try:
        engine = RoutineEngine(config=config)
        return COMMANDS[args.command](engine, args)
    except (OSError, ValueError) as e:
        print(f"\n❌ Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
