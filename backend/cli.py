#!/usr/bin/env python3
"""
MorningProof CLI - verify local proof photos and video frames against the configured model
"""
import argparse
import json
import sys
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import VerificationGatewayException
from app.models.verification import VerificationKind
from app.services import verification
from app.services.external.inference import InferenceClient, create_inference_client
from app.utils.images import image_to_base64, load_local_image

PHOTO_COMMANDS = {
    "bed": VerificationKind.BED,
    "sunlight": VerificationKind.SUNLIGHT,
    "hydration": VerificationKind.HYDRATION,
}
COMMANDS = tuple(PHOTO_COMMANDS) + ("custom-photo", "custom-video", "predefined")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cli.py", description="Verify habit proof images from disk")
    parser.add_argument("kind", choices=COMMANDS, help="Verification to run")
    parser.add_argument("images", nargs="+", help="Image file(s); video frames in chronological order")
    parser.add_argument("--habit-name", default="", help="Habit name (custom-photo, custom-video)")
    parser.add_argument("--criteria", default=None, help="Verification criteria (custom-photo, custom-video)")
    parser.add_argument("--allow-screenshots", action="store_true", help="Accept screenshots as proof (custom-photo)")
    parser.add_argument("--duration", type=float, default=None, help="Clip length in seconds (custom-video)")
    parser.add_argument("--habit-type", default=None, help="Catalog habit type (predefined)")
    return parser


def run(args: argparse.Namespace, client: InferenceClient):
    """Dispatch parsed arguments to the verification service"""
    images = [image_to_base64(load_local_image(path)) for path in args.images]

    if args.kind in PHOTO_COMMANDS:
        return verification.verify_photo(PHOTO_COMMANDS[args.kind], images[0], client)
    if args.kind == "custom-photo":
        return verification.verify_custom_habit(
            image_base64=images[0],
            habit_name=args.habit_name,
            client=client,
            ai_prompt=args.criteria,
            allows_screenshots=args.allow_screenshots,
        )
    if args.kind == "custom-video":
        return verification.verify_video(
            frames=images,
            habit_name=args.habit_name,
            client=client,
            ai_prompt=args.criteria,
            duration=args.duration,
        )
    return verification.verify_predefined_habit(args.habit_type or "", images[0], client)


def main(argv: Optional[List[str]] = None, client: Optional[InferenceClient] = None) -> int:
    """
    CLI entry point

    Args:
        argv: Arguments without the program name (defaults to sys.argv)
        client: Inference client; built from settings when omitted

    Returns:
        0 when a verdict was produced, 1 on any failure
    """
    args = build_parser().parse_args(argv)

    if args.kind in ("custom-photo", "custom-video") and not args.habit_name.strip():
        print("❌ --habit-name is required for custom verifications", file=sys.stderr)
        return 1
    if args.kind == "predefined" and not args.habit_type:
        print("❌ --habit-type is required for predefined verifications", file=sys.stderr)
        return 1

    try:
        if client is None:
            client = create_inference_client(settings.inference_config())
        verdict = run(args, client)
    except (VerificationGatewayException, OSError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(verdict.model_dump(mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
