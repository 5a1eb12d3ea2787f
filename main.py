"""
Main entry point for the Interview Assistant.
Provides a CLI interface for running interviews and listing candidates.
"""
import sys
import time
from pathlib import Path

from config import STORAGE_PATH
from agents.evaluator import create_evaluator
from dashboard import candidate_score, filter_candidates, get_stats, sort_candidates
from errors import InterviewAssistantError, QuestionGenerationError
from graph import InterviewRunner, Step
from state import MessageType
from storage import LocalStorage
from store import CandidateStore

SPEAKERS = {
    MessageType.BOT.value: "Interviewer",
    MessageType.USER.value: "You",
    MessageType.SYSTEM.value: "System",
}


def print_separator():
    print("=" * 60)


class MessagePrinter:
    """Prints chat messages the user hasn't seen yet."""

    def __init__(self, runner: InterviewRunner):
        self.runner = runner
        self.seen = 0

    def flush(self, skip_user: bool = True):
        messages = self.runner.get_messages()
        for msg in messages[self.seen:]:
            if skip_user and msg["type"] == MessageType.USER.value:
                continue
            print(f"{SPEAKERS[msg['type']]}: {msg['content']}\n")
        self.seen = len(messages)


def print_candidates(store: CandidateStore, status: str = "all", sort_by: str = "date"):
    candidates = sort_candidates(filter_candidates(store.candidates, status=status), sort_by)
    stats = get_stats(store.candidates)

    print(f"\n{stats['total']} candidates | {stats['completed']} completed | "
          f"{stats['in_progress']} in progress | {stats['pending']} pending")
    print("-" * 60)
    for c in candidates:
        score = candidate_score(c)
        score_text = f"{score}/100" if score is not None else "-"
        print(f"  {c['name'] or '(no name)':<25} {c['status']:<12} {score_text:>8}  {c['email']}")
    print()


def collect_contact_details(runner: InterviewRunner, printer: MessagePrinter):
    while runner.candidate["missing_fields"]:
        value = input("You: ").strip()
        if not value:
            continue
        runner.submit_message(value)
        printer.flush()


def run_interview(resume_path: Path, store: CandidateStore, mode: str = None):
    """Run an interactive interview session."""
    print_separator()
    print("INTERVIEW ASSISTANT")
    print_separator()

    evaluator = create_evaluator(mode)
    runner = InterviewRunner(store, evaluator)
    printer = MessagePrinter(runner)

    try:
        runner.upload_resume(resume_path.read_bytes(), resume_path.name)
    except InterviewAssistantError as e:
        print(f"\n{e.message}")
        sys.exit(1)

    print(f"\nLoaded resume: {resume_path.name}\n")
    printer.flush()
    collect_contact_details(runner, printer)

    while runner.step == Step.INFO_COLLECTION:
        input("Press Enter to start the interview...")
        try:
            runner.start_interview()
        except QuestionGenerationError as e:
            print(f"\n{e.message}\n")
            retry = input("Retry? [Y/n] ").strip().lower()
            if retry == "n":
                return
    printer.flush()

    # Conversation loop
    while not runner.is_complete():
        asked_at = time.monotonic()
        question = runner.current_question()
        print(f"[{question['difficulty']} | {question['time_limit']}s]")

        try:
            answer = input("You: ").strip()
        except KeyboardInterrupt:
            runner.pause_interview()
            print("\n\nInterview paused. Your progress has been saved.")
            return

        if answer.lower() in ["quit", "exit", "q"]:
            runner.pause_interview()
            print("\nInterview paused. Your progress has been saved.")
            return

        # Time spent typing counts against the question's limit
        answered = len(runner.candidate["interview_answers"])
        runner.tick(int(time.monotonic() - asked_at))
        if len(runner.candidate["interview_answers"]) > answered:
            print("(Answer not recorded - time expired)\n")
        else:
            runner.submit_message(answer)
        printer.flush()

    # Show final results
    print_separator()
    print("INTERVIEW COMPLETE")
    print_separator()

    candidate = runner.candidate
    details = candidate["scoring_details"]
    print(f"\nOverall Score: {details['overall_score']}/100 ({details['recommendation']})")
    print(f"  Technical:       {details['technical_score']}")
    print(f"  Communication:   {details['communication_score']}")
    print(f"  Problem Solving: {details['problem_solving_score']}")

    print("\nPer-question:")
    print("-" * 40)
    for i, ans in enumerate(candidate["interview_answers"], 1):
        print(f"  Q{i}: {ans['score']}/100 ({ans['time_used']}s) - {ans['feedback']}")

    if details["strengths"]:
        print("\nStrengths:")
        for item in details["strengths"]:
            print(f"  - {item}")
    if details["improvements"]:
        print("\nAreas for Improvement:")
        for item in details["improvements"]:
            print(f"  - {item}")
    print()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Interview Assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands during interview:
  quit, exit, q  - Pause the interview (progress is saved)

Examples:
  python main.py resume.pdf                  # Run an interview
  python main.py resume.docx --mode ai       # Use AI-generated questions
  python main.py --list --status completed   # List completed candidates
        """,
    )
    parser.add_argument("resume", nargs="?", type=Path, help="Resume file (PDF or DOCX)")
    parser.add_argument(
        "--mode",
        choices=["ai", "heuristic"],
        default=None,
        help="Evaluator to use (defaults to EVALUATOR_MODE)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List candidates and exit",
    )
    parser.add_argument("--status", default="all", help="Status filter for --list")
    parser.add_argument("--sort", choices=["date", "name", "score"], default="date", help="Sort order for --list")
    parser.add_argument("--storage", type=Path, default=STORAGE_PATH, help="Storage file")

    args = parser.parse_args()
    store = CandidateStore.load(LocalStorage(args.storage))

    if args.list:
        print_candidates(store, args.status, args.sort)
        return

    if not args.resume:
        parser.error("a resume file is required unless --list is given")
    if not args.resume.exists():
        parser.error(f"file not found: {args.resume}")

    run_interview(args.resume, store, args.mode)


if __name__ == "__main__":
    main()
