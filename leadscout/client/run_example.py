from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv

from leadscout.client.orchestrator import Phase, SearchOrchestrator


async def main():
    repo_root = Path(__file__).resolve().parents[2]
    load_dotenv(repo_root / ".env", override=False)
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

    base_url = os.getenv("LEADSCOUT_URL", "http://127.0.0.1:8000")
    query = " ".join(sys.argv[1:]) or "coffee shop"

    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        orchestrator = SearchOrchestrator(client, interval_s=float(os.getenv("POLL_INTERVAL_S", "10")))
        try:
            await orchestrator.submit(query)
            state = await orchestrator.wait()
        finally:
            await orchestrator.close()

    if state.phase is not Phase.DONE_SUCCESS:
        print(f"Search ended in {state.phase.value}: {state.error}")
        return

    print(f"Got {len(state.results)} results across {orchestrator.total_pages} page(s)")
    for row in orchestrator.current_rows:
        print(f"  {row['name'] or '-'} | {row['phone'] or '-'} | {', '.join(row['emails'] or [])}")

if __name__ == "__main__":
    asyncio.run(main())
