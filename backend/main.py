#!/usr/bin/env python3
"""
Competitive Intelligence Report

Single entry point to analyze a competitor with the remote CI workflow,
print the report and optionally export it as JSON.
"""

import asyncio
import sys
import argparse
from datetime import datetime, timezone

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

from core.config import settings
from models.session import AnalysisState
from services.analysis_session import AnalysisSession
from services.report_assembler import save_report
from services.report_view import build_report_view, render_text


def configure_logging(verbose: bool = False):
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


async def run_report(competitor: str, export_dir: str | None = None, verbose: bool = False) -> int:
    """Run one analysis and print the report"""

    if verbose:
        print("🧠 COMPETITIVE INTELLIGENCE DASHBOARD")
        print("=" * 60)
        print(f"Analyzing {competitor}...")
        print("Coordinating intelligence agents • Gathering data • Analyzing signals")
        print("")

    session = AnalysisSession()
    state = await session.analyze(competitor)

    if state != AnalysisState.SUCCESS:
        print(f"❌ Analysis Failed: {session.error}")
        return 1

    print(render_text(build_report_view(session)))

    if export_dir:
        moment = datetime.now(timezone.utc)
        path = save_report(session.export(moment), export_dir, moment)
        print(f"\n📄 Report exported to {path}")

    return 0


def cli_main():
    """CLI interface"""
    parser = argparse.ArgumentParser(
        description="Generate a competitive intelligence report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --competitor "LangChain"
  python main.py --competitor "CrewAI" --export-dir reports --verbose
        """
    )

    parser.add_argument(
        "--competitor",
        required=True,
        help="Competitor name to analyze, e.g. LangChain, CrewAI, AutoGPT"
    )
    parser.add_argument(
        "--export-dir",
        help="Directory to write the JSON report to"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    if not settings.LYZR_API_KEY:
        print("❌ Error: LYZR_API_KEY environment variable is required")
        return 1

    return asyncio.run(run_report(args.competitor, args.export_dir, args.verbose))


if __name__ == "__main__":
    sys.exit(cli_main())
