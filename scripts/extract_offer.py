import asyncio
import argparse
import json
from pathlib import Path

from procurement_intake.agents.extraction import extraction_agent
from procurement_intake.database import db

async def run_extraction(path: Path, as_text: bool):
    print(f"--- Extracting offer: {path.name} ---")
    await db.commodity_groups.ensure_seeded()

    if as_text:
        fields = await extraction_agent.extract_from_text(path.read_text(encoding="utf-8"))
    else:
        fields = await extraction_agent.extract_from_file(path.read_bytes(), path.name)

    enriched = await extraction_agent.enrich_fields(fields)
    print(json.dumps(enriched, indent=2, ensure_ascii=False, default=str))

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Extract procurement request fields from a vendor offer")
    parser.add_argument("path", type=Path, help="PDF/PNG/JPEG offer, or a text file with --text")
    parser.add_argument("--text", action="store_true", help="Treat the file as plain offer text")
    args = parser.parse_args()

    db.connect()
    try:
        asyncio.run(run_extraction(args.path, args.text))
    finally:
        db.close()
