"""
CLI for loading a specialist roster into Supabase.
Thin wrapper around SupabaseStore.upsert_specialist.
"""

import sys
import json
import asyncio
import argparse
from pathlib import Path

from supabase import create_client

from triage_handoff import config
from triage_handoff.database import DatabaseError, SupabaseStore
from triage_handoff.models.domain import Specialist, Specialty
from triage_handoff.utils.logger import configure_logging, get_logger

configure_logging(level="INFO", use_structured=False)
logger = get_logger(__name__)

DEFAULT_ROSTER = [
    # Stable ids: re-running the seed upserts the same rows
    Specialist(id="doc-cardio-01", name="Nguyễn Văn An", specialty=Specialty.CARDIOLOGY.value),
    Specialist(id="doc-neuro-01", name="Trần Thị Bình", specialty=Specialty.NEUROLOGY.value),
    Specialist(id="doc-resp-01", name="Lê Hoàng Cường", specialty=Specialty.RESPIRATORY.value),
    Specialist(id="doc-gastro-01", name="Phạm Thu Dung", specialty=Specialty.GASTROENTEROLOGY.value),
    Specialist(id="doc-general-01", name="Võ Minh Đức", specialty=Specialty.GENERAL.value),
]


def load_roster(path: Path) -> list[Specialist]:
    """Reads a JSON list of {name, specialty, available} objects."""
    with open(path, "r", encoding="utf-8") as f:
        return [Specialist.model_validate(item) for item in json.load(f)]


async def seed(store: SupabaseStore, roster: list[Specialist]) -> None:
    for specialist in roster:
        await store.upsert_specialist(specialist)
        logger.info(
            "specialist_seeded", name=specialist.name, specialty=specialist.specialty
        )


def main() -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Seed specialists into Supabase")
    parser.add_argument(
        "roster",
        type=Path,
        nargs="?",
        help="JSON roster file (defaults to a built-in sample roster)",
    )
    args = parser.parse_args()

    settings = config.get_settings()
    if not settings.supabase_url or not settings.supabase_service_key:
        logger.error("missing_supabase_credentials")
        return 1

    roster = load_roster(args.roster) if args.roster else DEFAULT_ROSTER
    store = SupabaseStore(create_client(settings.supabase_url, settings.supabase_service_key))

    try:
        asyncio.run(seed(store, roster))
    except DatabaseError as e:
        logger.error("seeding_failed", error=str(e))
        return 1

    logger.info("seeding_completed", count=len(roster))
    return 0


if __name__ == "__main__":
    sys.exit(main())
