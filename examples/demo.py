"""Run a small workflow from the command line and watch its events.

Run with:
    python examples/demo.py
"""

from __future__ import annotations

import asyncio
import json
import logging

from easyflow import Workflow


async def fetch(url, emit_message):
    emit_message(f"fetching {url}")
    await asyncio.sleep(0.05)
    return f"<feed from {url}>"


def parse(page):
    return page.upper()


async def index(document):
    await asyncio.sleep(0.02)
    return f"indexed {len(document)} chars"


async def thumbnail(document, emit_message):
    emit_message("rendering thumbnail")
    await asyncio.sleep(0.01)
    return "thumbnail.png"


def publish(results):
    return {"published": results}


class Cleanup:
    """Housekeeping that runs after publishing."""

    name = "Cleanup"

    def __init__(self) -> None:
        self.sequence = [self.purge_cache, self.rotate_logs]

    def purge_cache(self, value):
        return value

    def rotate_logs(self, value):
        return value


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    cleanup = Workflow(id="cleanup")
    cleanup.sequence(Cleanup)

    flow = Workflow("demo")
    flow.sequence("Import", fetch, parse).parallel("Process", index, thumbnail).sequence(publish, cleanup)
    flow.disable("Cleanup.rotate_logs")

    flow.on_status(lambda node_id, name, lifecycle: print(f"status  {name or node_id}: {lifecycle}"))
    flow.on_message(lambda node_id, name, text: print(f"message {name or '-'} ({node_id}): {text}"))

    result = await flow.run("https://example.com/feed")
    print(json.dumps(result, indent=2))
    print(json.dumps(flow.status().to_dict(), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
