#!/usr/bin/env python3
"""
Play the daily quiz in the terminal.

Usage:
    python -m play                      # today's quiz
    python -m play --date 2024-03-07    # an older quiz
    python -m play --overturn 3         # "I was right" on question 3
"""

import argparse
import logging
import sys

from config import Config
from services.quiz_service.client import QuizApiClient
from services.quiz_service.date_keys import parse_canonical_key
from services.quiz_service.evaluator import AnswerEvaluator
from services.quiz_service.local_state import JsonFileStore, StorageError
from services.quiz_service.session import (
    QuizSession, IncompleteAnswersError,
    VERDICT_ALIAS, VERDICT_CORRECT, VERDICT_OVERTURNED,
)


def quiz_date(value: str) -> str:
    """argparse type: `2024-03-07` or `20240307` -> `20240307`."""
    key = value.strip().replace("-", "")
    try:
        parse_canonical_key(key)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD or YYYYMMDD") from None
    return key


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Fem kjappe: five quick questions a day")
    parser.add_argument("--date", type=quiz_date,
                        help="quiz date as YYYY-MM-DD or YYYYMMDD (default: today)")
    parser.add_argument("--api", default=Config.QUIZ_API_URL, help="quiz API base URL")
    parser.add_argument("--state", default=Config.LOCAL_STATE_PATH, help="local state file")
    parser.add_argument("--overturn", type=int, metavar="N",
                        help="toggle 'I was right' for question N (1-based)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def print_results(session: QuizSession):
    for i, q in enumerate(session.questions):
        print(f"\n{i + 1}. {q.question}")
        print(f"   Ditt svar: {session.answers[i] if i < len(session.answers) else ''}")
        verdict = session.result_for(i)
        if verdict == VERDICT_CORRECT:
            print("   ✅ Korrekt!")
        elif verdict == VERDICT_ALIAS:
            print(f"   ✅ Korrekt. {q.answer}")
        elif verdict == VERDICT_OVERTURNED:
            print(f"   ✅ Rettet av deg. Rett svar: '{q.answer}'")
        else:
            print(f"   ❌ Feil. Rett svar: '{q.answer}'")


def ask_answers(session: QuizSession):
    while True:
        answers = [input(f"\n{i + 1}. {q.question}\n> ") for i, q in enumerate(session.questions)]
        try:
            return session.submit(answers)
        except IncompleteAnswersError as e:
            print(f"\n{e}")


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    session = QuizSession(
        api=QuizApiClient(args.api),
        store=JsonFileStore(args.state),
        evaluator=AnswerEvaluator(Config.FUZZY_THRESHOLD),
        quiz_date=args.date,
    ).load()

    if not session.questions:
        print("Ingen spørsmål i dag!\nSjekk tilbake i morgen 😎")
        return 0

    if session.theme:
        print(f"Tema: {session.theme}")
    if session.announcement:
        print(session.announcement)

    try:
        if not session.submitted:
            ask_answers(session)
        if args.overturn:
            session.toggle_overturn(args.overturn - 1)
    except (StorageError, IndexError) as e:
        print(f"Feil: {e!r}", file=sys.stderr)
        return 1

    print_results(session)

    if session.average_correct is not None:
        print(f"\nDagens gjennomsnittlige riktige svar: "
              f"{session.average_correct * 5:.2f} / 5 ({session.total_submissions} svar)")

    weekly = session.weekly_summary()
    if weekly:
        print("\n📅 Ukentlig Sammendrag")
        print(f"✅ Ditt snitt: {weekly.user_average:.2f}  📊 Alles snitt: {weekly.server_average:.2f}"
              f"  🔥 Streak: {weekly.streak}")
        for row in weekly.rows:
            print(f"  {row['day'][:3]}: {row['userCorrect']} / {row['averageCorrect']:.2f}")

    print("\n" + session.share_text())
    if session.prev_date:
        print(f"\n← Forrige: {session.prev_date}")
    if session.next_date:
        print(f"Neste → {session.next_date}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
