"""
Pravas command line.

Usage:
    pravas serve [--host HOST] [--port PORT] [--reload]
    pravas record (--trip-id ID | --new-trip TITLE)
    pravas transcribe ENTRY_ID
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pravas.client import APIError, PravasClient
from pravas.core.config import Settings, get_settings
from pravas.core.exceptions import PravasError
from pravas.core.models import Identity
from pravas.core.utils import configure_logging
from pravas.services.recorder import (
    RecorderState,
    RecordingSession,
    SaveFlow,
    create_capture,
)

logger = logging.getLogger(__name__)

RECORD_HELP = "  [p] pause  [r] resume  [s] stop"


# ------------------------------------------------------------------
# serve
# ------------------------------------------------------------------


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    uvicorn.run(
        "pravas.api.app:app",
        host=args.host or settings.app_host,
        port=args.port or settings.app_port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


# ------------------------------------------------------------------
# record
# ------------------------------------------------------------------


async def _prompt(text: str) -> str:
    return (await asyncio.to_thread(input, text)).strip()


async def _record(args: argparse.Namespace, settings: Settings) -> int:
    session = RecordingSession(
        capture_factory=lambda: create_capture(
            sample_rate=settings.recording_sample_rate,
            channels=settings.recording_channels,
        ),
        mime_type=settings.recording_mime,
    )

    async with PravasClient(settings.api_base_url, token=settings.api_token) as client:
        try:
            identity = await client.whoami()
        except APIError as exc:
            print(f"  ERROR  {exc.message}")
            return 1

        try:
            await session.start()
        except PravasError as exc:
            print(f"  ERROR  {exc.detail}")
            return 1

        print("  Recording..." + RECORD_HELP)
        try:
            while session.state is not RecorderState.stopped:
                command = (await _prompt(f"  {session.state} {session.elapsed}s> ")).lower()
                if command == "p":
                    session.pause()
                elif command == "r":
                    session.resume()
                elif command == "s":
                    await session.stop()
        except (EOFError, KeyboardInterrupt):
            await session.stop()

        blob = session.blob
        print(f"  Stopped after {session.elapsed}s ({blob.size} bytes)")

        answer = (await _prompt("  Save this recording? [Y/n] ")).lower()
        flow = SaveFlow(client, session)
        try:
            if answer == "n":
                flow.discard()
                print("  Discarded.")
                return 0
            entry = await _save_until_done(flow, client, args, identity)
        finally:
            await session.aclose()

    if entry is None:
        print("  Discarded.")
        return 1
    print(f"  SAVED  entry {entry['id']} in trip {entry['trip_id']}")
    return 0


async def _save_until_done(
    flow: SaveFlow,
    client: PravasClient,
    args: argparse.Namespace,
    identity: Identity | None,
) -> dict | None:
    """Save the stopped recording, offering retry or discard after each failure.

    Returns the created entry, or None once the user discards.
    """
    while True:
        try:
            if flow.created_trip is not None:
                # the trip already exists from an earlier attempt
                return await flow.attach_to_trip(flow.created_trip["id"], identity)
            if args.new_trip is not None:
                return await flow.create_trip_and_attach(args.new_trip, identity)
            return await flow.attach_to_trip(args.trip_id, identity)
        except PravasError as exc:
            print(f"  ERROR  {exc.detail}")

        answer = (await _prompt("  [r] retry  [d] discard> ")).lower()
        if answer == "d":
            flow.discard()
            return None
        if identity is None:
            try:
                identity = await client.whoami()
            except APIError as exc:
                print(f"  ERROR  {exc.message}")


# ------------------------------------------------------------------
# transcribe
# ------------------------------------------------------------------


async def _transcribe(args: argparse.Namespace, settings: Settings) -> int:
    async with PravasClient(settings.api_base_url, token=settings.api_token) as client:
        try:
            result = await client.transcribe_entry(args.entry_id)
        except APIError as exc:
            print(f"  ERROR  {exc.message}")
            return 1
        entry = await client.get_entry(args.entry_id)

    print(f"  STATUS  {result['status']}")
    print(f"  {settings.source_language.upper()}  {entry.get('transcript_mr') or ''}")
    print(f"  {settings.target_language.upper()}  {entry.get('transcript_en') or ''}")
    return 0


# ------------------------------------------------------------------
# Main
# ------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pravas", description="Pravas travel diary")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    record = sub.add_parser("record", help="Record a voice memo and save it to a trip")
    target = record.add_mutually_exclusive_group(required=True)
    target.add_argument("--trip-id", help="Attach to an existing trip")
    target.add_argument("--new-trip", metavar="TITLE", help="Create a trip and attach to it")

    transcribe = sub.add_parser("transcribe", help="Transcribe and translate an entry")
    transcribe.add_argument("entry_id")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        return _serve(args, settings)
    if args.command == "record":
        return asyncio.run(_record(args, settings))
    return asyncio.run(_transcribe(args, settings))


if __name__ == "__main__":
    sys.exit(main())
