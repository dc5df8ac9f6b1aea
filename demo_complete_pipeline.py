#!/usr/bin/env python3
"""
Complete Pipeline Demo: Definition → Analysis → Diagrams → HTML export

Shows the full workflow:
1. Load a Survey Definition (YAML file, or the built-in example)
2. Analyze the survey
3. Generate Graphviz diagrams of its logic
4. Compile the standalone HTML artifact
"""

import logging
import sys

from surveyc.analyzer import analyze_survey
from surveyc.backends import DotMode, ExportOptions, save_dot_file, save_export
from surveyc.examples import build_example_survey
from surveyc.serialization import survey_from_yaml, survey_to_yaml


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Definition → Analysis → Diagrams → HTML")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Load definition
    # =========================================================================
    print("\n1. LOADING DEFINITION...")
    if len(sys.argv) > 1:
        with open(sys.argv[1], encoding="utf-8") as f:
            survey = survey_from_yaml(f.read())
    else:
        survey = build_example_survey()
        with open("survey.yaml", "w", encoding="utf-8") as f:
            f.write(survey_to_yaml(survey))
        print("   ✓ Wrote survey.yaml")
    print(f"   ✓ Loaded survey: {survey.id}")
    print(f"   ✓ Questions: {len(survey.questions)}")
    print(f"   ✓ Languages: {', '.join(survey.settings.enabled_languages())}")

    # =========================================================================
    # STEP 2: Analyze Survey
    # =========================================================================
    print("\n2. ANALYZING SURVEY...")
    report = analyze_survey(survey)
    print(f"   ✓ Rules: {report.total_rules}")
    print(f"   ✓ Conditional questions: {sorted(report.conditional_questions)}")
    print(f"   ✓ Cycles detected: {report.has_cycles}")

    if report.warnings:
        print(f"\n   Warnings ({len(report.warnings)}):")
        for warning in report.warnings[:5]:  # Show first 5
            print(f"      - {warning}")
        if len(report.warnings) > 5:
            print(f"      ... and {len(report.warnings) - 5} more")

    # =========================================================================
    # STEP 3: Generate Diagrams
    # =========================================================================
    print("\n3. GENERATING DIAGRAMS...")
    for mode in DotMode:
        filename = f"survey_{mode.value}.dot"
        save_dot_file(survey, filename, mode=mode)
        print(f"   ✓ Saved {filename}")

    # =========================================================================
    # STEP 4: Export
    # =========================================================================
    print("\n4. COMPILING HTML...")
    save_export(survey, f"{survey.id}.html", ExportOptions())
    print(f"   ✓ Saved {survey.id}.html (open it in any browser, no server needed)")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("\nTo visualize the diagrams:")
    print("  dot -Tpng survey_detailed.dot -o survey_detailed.png")
    print("=" * 80)


if __name__ == "__main__":
    main()
