"""CLI entry point for the design thumbnail toolchain."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from background_estimation import Color, estimate_background_color
from . import __version__, config
from .errors import ThumbnailError
from .pipeline import decode_image, encode_image, process_object, render_renditions
from .profiles import DEFAULT_PROFILES, load_profiles
from .storage import LocalObjectStore, S3ObjectStore

EXTENSIONS = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp", "GIF": "gif"}


def format_color(color: Color) -> str:
    return "#" + "".join(f"{channel:02x}" for channel in color)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Square thumbnails padded with the image's own background color")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    render = sub.add_parser("render", help="Render every profile of a local image into a directory")
    render.add_argument("source", type=Path, help="Source image path")
    render.add_argument(
        "--outdir", type=Path, default=Path("artifacts/thumbnails"), help="Directory for renditions"
    )
    render.add_argument("--profiles", type=Path, default=None, help="JSON profile file (default: small/large)")
    render.add_argument(
        "--crop-size",
        type=int,
        default=config.crop_size(),
        help=f"Corner sample size in pixels (env {config.CROP_SIZE_ENV})",
    )
    render.add_argument("--fail-fast", action="store_true", help="Stop at the first failing profile")
    render.add_argument("--workers", type=int, default=1, help="Render profiles on this many threads")

    background = sub.add_parser("background", help="Print the estimated background color of an image")
    background.add_argument("source", type=Path, help="Source image path")
    background.add_argument("--crop-size", type=int, default=config.crop_size(), help="Corner sample size in pixels")

    process = sub.add_parser("process", help="Process one stored object like the upload trigger does")
    process.add_argument("bucket", help="Bucket name (a directory under --root for local storage)")
    process.add_argument("key", help="Object key, e.g. designs/42/upload.png")
    process.add_argument("--root", type=Path, default=Path("."), help="Local storage root")
    process.add_argument("--s3", action="store_true", help="Use S3 instead of local storage")
    process.add_argument(
        "--output-bucket",
        default=config.default_bucket(),
        help=f"Bucket for renditions (env {config.BUCKET_ENV}; default: source bucket)",
    )
    process.add_argument("--profiles", type=Path, default=None, help="JSON profile file (default: small/large)")
    process.add_argument("--crop-size", type=int, default=config.crop_size(), help="Corner sample size in pixels")
    process.add_argument("--fail-fast", action="store_true", help="Stop at the first failing profile")
    process.add_argument("--workers", type=int, default=1, help="Render profiles on this many threads")

    return parser


def _render(args: argparse.Namespace, profiles) -> int:
    image = decode_image(args.source.read_bytes())
    report = render_renditions(
        image,
        profiles,
        crop_size=args.crop_size,
        fail_fast=args.fail_fast,
        max_workers=args.workers,
    )
    print(f"[background] {format_color(report.background)}")

    args.outdir.mkdir(parents=True, exist_ok=True)
    failed = dict(report.failures)
    for name, rendition in report.renditions.items():
        profile = profiles[name]
        try:
            body = encode_image(rendition, profile)
        except ThumbnailError as exc:
            if args.fail_fast:
                raise
            failed[name] = exc
            continue
        ext = EXTENSIONS.get(profile.format.upper(), profile.format.lower())
        out_path = args.outdir / f"{args.source.stem}_{name}.{ext}"
        out_path.write_bytes(body)
        print(out_path)

    for name, exc in failed.items():
        print(f"[error] profile {name}: {exc}", file=sys.stderr)
    return 1 if failed else 0


def main(argv: Sequence[str] | None = None) -> None:
    # Load .env if present (ignored if values already in env)
    config.load_env_file()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if args.command is None:
        parser.print_help()
        return

    if getattr(args, "workers", 1) < 1:
        parser.error("--workers must be at least 1")

    try:
        profiles = (
            load_profiles(args.profiles, default_quality=config.jpeg_quality())
            if getattr(args, "profiles", None)
            else DEFAULT_PROFILES
        )

        if args.command == "background":
            image = decode_image(args.source.read_bytes())
            print(format_color(estimate_background_color(image, args.crop_size)))
            return

        if args.command == "render":
            status = _render(args, profiles)
            if status:
                raise SystemExit(status)
            return

        if args.command == "process":
            store = S3ObjectStore() if args.s3 else LocalObjectStore(args.root)
            result = process_object(
                store,
                args.bucket,
                args.key,
                profiles,
                output_bucket=args.output_bucket,
                crop_size=args.crop_size,
                fail_fast=args.fail_fast,
                max_workers=args.workers,
            )
            if not result.ok:
                raise SystemExit(1)
            return
    except FileNotFoundError as exc:
        parser.exit(2, f"error: {exc}\n")
    except ThumbnailError as exc:
        parser.exit(1, f"error: {exc}\n")


if __name__ == "__main__":
    main()
