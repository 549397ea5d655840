#!/usr/bin/env python3
"""
ATS CV Tailor - CLI Entry Point

Takes a CV (PDF or TXT) and a job description, sends them through the
tailoring and scoring services, and writes a styled HTML resume.

Usage:
    python -m cv_tailor.main --cv input/resume.pdf --job input/job_description.txt
"""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from .client import ServiceClient
from .config import Settings, configure_logging
from .document import DOWNLOAD_FILENAME, write_document
from .errors import CVTailorError
from .extractor import extract_text
from .state import AppState, Failed, score_rating
from .workflow import TailorWorkflow


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="ATS CV Tailor - Tailor your CV to a job description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m cv_tailor.main --cv resume.pdf --job job.txt
    python -m cv_tailor.main -c resume.txt -j job.txt -o custom_output/
    python -m cv_tailor.main --cv tailored.txt --format-only
        """
    )

    parser.add_argument(
        "-c", "--cv",
        type=str,
        required=True,
        help="Path to CV file (.pdf or .txt)"
    )

    parser.add_argument(
        "-j", "--job",
        type=str,
        help="Path to job description text file"
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default="output",
        help="Output directory (default: output/)"
    )

    parser.add_argument(
        "--service-url",
        type=str,
        help="Base URL of the tailoring/scoring service (default: $CV_TAILOR_SERVICE_URL)"
    )

    parser.add_argument(
        "--format-only",
        action="store_true",
        help="Treat --cv as already tailored text and only render the HTML resume"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args(argv)
    if not args.format_only and not args.job:
        parser.error("--job is required unless --format-only is given")
    return args


def load_cv(path: str) -> str:
    """Extract the text of a CV file."""
    file_path = Path(path)
    if not file_path.exists():
        raise CVTailorError(f"File not found: {path}")

    content_type, _ = mimetypes.guess_type(file_path.name)
    document = extract_text(file_path.name, content_type, file_path.read_bytes())
    return document.text


def load_job(path: str) -> str:
    file_path = Path(path)
    if not file_path.exists():
        raise CVTailorError(f"File not found: {path}")
    return file_path.read_text(encoding="utf-8")


def print_summary(state: AppState, verbose: bool = False) -> None:
    """Print the ATS score of the tailored CV."""
    score = state.ats_score

    print("\n" + "=" * 60)
    print("ATS CV TAILOR - SCORE SUMMARY")
    print("=" * 60)

    filled = int(score.score / 10)
    bar = "█" * filled + "░" * (10 - filled)
    print(f"\nATS Score: [{bar}] {score.score} ({score_rating(score.score)})")

    print("\nScore Breakdown:")
    for key, value in score.breakdown.items():
        print(f"  {key.capitalize()}: {value}")

    if score.recommendations:
        print("\nRecommendations:")
        for rec in score.recommendations:
            print(f"  • {rec}")

    if verbose:
        print("\n--- Tailored CV ---")
        print(state.tailored_cv)

    print("\n" + "=" * 60)


async def run_workflow(settings: Settings, cv_text: str, job_description: str) -> AppState:
    async with ServiceClient(settings.service_url, settings.timeout) as client:
        workflow = TailorWorkflow(client)
        workflow.load(cv_text, job_description)
        async for update in workflow.run_with_progress():
            if "message" in update and update["step"] != "error":
                print(update["message"])
        return workflow.state


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    settings = Settings.from_env()
    if args.service_url:
        settings.service_url = args.service_url.rstrip("/")
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    print("ATS CV Tailor")
    print("-" * 40)

    output_path = Path(args.output) / DOWNLOAD_FILENAME

    try:
        print(f"Loading CV: {args.cv}")
        cv_text = load_cv(args.cv)

        if args.format_only:
            write_document(output_path, cv_text)
            print(f"\nSaved resume: {output_path}")
            return 0

        print(f"Loading job description: {args.job}")
        job_description = load_job(args.job)
    except CVTailorError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    state = asyncio.run(run_workflow(settings, cv_text, job_description))

    if isinstance(state.phase, Failed):
        print(state.error, file=sys.stderr)
        return 1

    print_summary(state, args.verbose)

    write_document(output_path, state.tailored_cv)
    print(f"\nSaved resume: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
