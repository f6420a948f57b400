"""riow CLI entrypoints."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import uuid
from pathlib import Path
from typing import Any

from .cli_progress import ProgressTicker, status_label
from .config import ClientSettings
from .errors import PollTimeout, RiowError
from .jobs.client import JobClient
from .jobs.fetcher import ImageFetcher
from .jobs.status import JobHandle
from .runs.events import EventWriter
from .scene.limits import check_service_limits
from .scene.model import Scene, scene_from_dict, scene_to_dict
from .scene.presets import default_scene
from .session import RenderSession
from .utils import load_dotenv, write_json
from .wire.mapper import scene_to_request


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="riow", description="Ray tracing render service client")
    sub = parser.add_subparsers(dest="command")

    request = sub.add_parser("request", help="Print the wire request for a scene")
    request.add_argument("--scene", help="Scene JSON file (default scene when omitted)")

    render = sub.add_parser("render", help="Submit a scene and download the image")
    render.add_argument("--scene", help="Scene JSON file (default scene when omitted)")
    render.add_argument("--out", required=True, help="Output image path")
    render.add_argument("--events", help="Path to events.jsonl")
    render.add_argument("--base-url", dest="base_url")
    render.add_argument("--poll-interval", dest="poll_interval", type=float)
    render.add_argument("--poll-timeout", dest="poll_timeout", type=float)
    render.add_argument("--max-polls", dest="max_polls", type=int)

    status = sub.add_parser("status", help="Poll a job status URL once")
    status.add_argument("--status-url", dest="status_url", required=True)

    scene = sub.add_parser("scene", help="Write the default scene file")
    scene.add_argument("--out", required=True, help="Scene JSON path")

    return parser


def _load_scene(path: str | None) -> Scene:
    if not path:
        return default_scene()
    payload: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    return scene_from_dict(payload)


def _handle_request(args: argparse.Namespace) -> int:
    try:
        scene = _load_scene(args.scene)
        request = scene_to_request(scene)
    except (OSError, ValueError, RiowError) as exc:
        print(f"Invalid scene: {exc}")
        return 1
    print(json.dumps(request, indent=2))
    return 0


def _handle_render(args: argparse.Namespace) -> int:
    try:
        settings = ClientSettings.from_env().override(
            base_url=args.base_url,
            poll_interval=args.poll_interval,
            poll_timeout=args.poll_timeout,
            max_polls=args.max_polls,
        )
        policy = settings.poll_policy()
    except ValueError as exc:
        print(f"Invalid settings: {exc}")
        return 1
    try:
        scene = _load_scene(args.scene)
        check_service_limits(scene)
    except (OSError, ValueError, RiowError) as exc:
        print(f"Invalid scene: {exc}")
        return 1

    out_path = Path(args.out)
    events_path = Path(args.events) if args.events else out_path.with_suffix(".events.jsonl")
    events = EventWriter(events_path, out_path.stem or str(uuid.uuid4()))
    session = RenderSession(
        JobClient(settings.base_url, request_timeout=settings.request_timeout),
        ImageFetcher(download_timeout=settings.download_timeout),
        policy=policy,
        events=events,
    )

    ticker = ProgressTicker(status_label(None))
    ticker.start_ticking()
    error: Exception | None = None
    try:
        with asyncio.run(session.render(scene, on_status=ticker.update_status)) as image:
            image.save(out_path)
    except (RiowError, OSError) as exc:
        error = exc
    finally:
        ticker.stop(done=error is None)
    if error is not None:
        if isinstance(error, PollTimeout):
            print(f"Gave up waiting: {error}")
        else:
            print(f"Render failed: {error}")
        if session.last_handle is not None:
            print(f"Job {session.last_handle.id} can still be polled at {session.last_handle.status_url}")
        return 1
    print(f"Saved {out_path}")
    return 0


def _handle_status(args: argparse.Namespace) -> int:
    try:
        settings = ClientSettings.from_env()
    except ValueError as exc:
        print(f"Invalid settings: {exc}")
        return 1
    client = JobClient(settings.base_url, request_timeout=settings.request_timeout)
    handle = JobHandle(id=args.status_url.rstrip("/").rsplit("/", 1)[-1], status_url=args.status_url)
    try:
        status = asyncio.run(client.poll(handle))
    except RiowError as exc:
        print(f"Status failed: {exc}")
        return 1
    print(status_label(status))
    if status.is_terminal:
        print(status.download_url)
    return 0


def _handle_scene(args: argparse.Namespace) -> int:
    out_path = Path(args.out)
    write_json(out_path, scene_to_dict(default_scene()))
    print(f"Wrote {out_path}")
    return 0


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command == "request":
        raise SystemExit(_handle_request(args))
    if args.command == "render":
        raise SystemExit(_handle_render(args))
    if args.command == "status":
        raise SystemExit(_handle_status(args))
    if args.command == "scene":
        raise SystemExit(_handle_scene(args))
    parser.print_help(sys.stdout)
    raise SystemExit(1)


if __name__ == "__main__":
    main()
