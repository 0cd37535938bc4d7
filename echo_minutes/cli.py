"""
CLI entrypoint: turn a recording (or a live capture) into a meeting note.

Run as `echo-minutes --audio meeting.webm --title "Weekly Sync"` or
`python -m echo_minutes.cli`.
"""

import os
import sys
import logging
import argparse
from datetime import datetime
from pathlib import Path

from echo_minutes import __version__
from echo_minutes.adapters.whisper_cpp.transcription import list_models
from echo_minutes.config import create_use_case, get_config
from echo_minutes.domain.errors import MeetingPipelineError
from echo_minutes.use_cases.meeting_notes import MeetingRequest

logger = logging.getLogger(__name__)


def build_parser(cfg) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="echo-minutes", description="Transcribe a meeting and write a structured note.")
    g = p.add_mutually_exclusive_group()
    g.add_argument("--audio", type=str, help="Path to a recorded meeting (webm, m4a, wav, ...)")
    g.add_argument("--record", action="store_true", help="Record from the microphone until Enter is pressed")

    p.add_argument("--title", type=str, help="Meeting title")
    p.add_argument("--attendees", type=str, default=cfg.attendees_default, help="Attendees, comma separated")
    p.add_argument("--language", type=str, default=cfg.language, help="Language code, or 'auto'")
    p.add_argument("--stdout", action="store_true", help="Print the note instead of saving it to the vault")
    p.add_argument("--list-models", action="store_true", help="List downloaded whisper.cpp models and exit")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    return p


def main(argv=None) -> int:
    cfg = get_config()
    args = build_parser(cfg).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if (args.debug or cfg.debug) else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.version:
        print(f"echo-minutes {__version__}")
        return 0

    if args.list_models:
        for size in list_models(cfg.model_dir):
            print(size)
        return 0

    if not (args.audio or args.record):
        print("One of --audio or --record is required", file=sys.stderr)
        return 2
    if not args.title or not args.title.strip():
        print("Please enter a meeting title (--title)", file=sys.stderr)
        return 2

    use_case = create_use_case(cfg)
    flags = dict(
        extract_action_items=cfg.auto_extract_action_items,
        detect_decisions=cfg.auto_detect_decisions,
        link_notes=cfg.auto_link_notes,
        save=not args.stdout,
    )

    try:
        if args.record:
            use_case.start_recording()
            try:
                input("Recording… press Enter to stop. ")
            except (KeyboardInterrupt, EOFError) as e:
                use_case.cancel_recording()
                print("\nRecording cancelled.", file=sys.stderr)
                return 130 if isinstance(e, KeyboardInterrupt) else 1
            except Exception:
                use_case.cancel_recording()
                raise
            note = use_case.stop_recording(args.title, args.attendees, args.language, **flags)
        else:
            audio_path = Path(args.audio)
            req = MeetingRequest(
                audio=audio_path.read_bytes(),
                title=args.title,
                attendees=args.attendees,
                language=args.language,
                suffix=audio_path.suffix or ".webm",
                recorded_at=datetime.fromtimestamp(os.path.getmtime(audio_path)),
                **flags,
            )
            note = use_case.execute(req)
    except (MeetingPipelineError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for warning in note.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    if args.stdout:
        print(note.content)
    else:
        print(f"Meeting note created: {note.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
