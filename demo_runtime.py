#!/usr/bin/env python3
"""
Demo: Walk a scripted respondent through the example survey.

Prints the visible question at every step, the progress, and the final
response summary.
"""

import json
import random

from surveyc.examples import build_example_survey
from surveyc.model import UploadedFile
from surveyc.runtime import SurveySession, utc_now


ANSWERS = {
    "customer": "yes",
    "age": "34",
    "country": "es",
    "last_purchase": "2024-05-01",
    "satisfaction": "2",
    "complaint": "Delivery was late.",
    "channels": ["web", "app"],
    "app_rating": {"speed": "ok", "design": "good"},
    "priorities": ["quality", "price", "service"],
    "receipt": [UploadedFile("receipt.pdf", 120_000)],
}


def main():
    session = SurveySession(build_example_survey(), language="es", rng=random.Random(7), clock=utc_now)

    print("=" * 70)
    print(f"RUNTIME DEMO: {session.text(session.survey.title)}")
    print("=" * 70)

    while True:
        question = session.current_question
        print(f"\n[{session.progress:3d}%] {session.question_number}: {session.text(question.text)}")

        if question.id in ANSWERS:
            result = session.respond(question.id, ANSWERS[question.id])
            hidden = sorted(qid for qid, visible in result.visibility.items() if not visible)
            print(f"       answered {ANSWERS[question.id]!r}; hidden now: {hidden}")

        if session.is_last:
            break
        if not session.next():
            print(f"       refused: {session.errors[question.id]}")
            return

    snapshot = session.submit()
    print("\n" + "=" * 70)
    print(session.text(session.settings.completion_message))
    print("=" * 70)
    for entry in snapshot.summary:
        print(f"\n{entry.question_text}")
        for line in entry.display.splitlines():
            print(f"    {line}")

    print("\nSnapshot:")
    print(json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    main()
