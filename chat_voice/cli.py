"""CLI interface for trying language detection, splitting and speech output."""

import argparse
import asyncio
import logging
import sys

from chat_voice.constants import DEMO_SENTENCES, INDIC_LANGUAGES, VERSION
from chat_voice.detect import base_language, detect_language, language_name
from chat_voice.models import Outcome, SpeechResult
from chat_voice.service import VoiceService
from chat_voice.splitter import split_segments


def _print_result(result: SpeechResult) -> None:
    for r in result.segments:
        line = f"  [{r.outcome.value}] {r.segment.language} via {r.backend or '-'}"
        if r.reason:
            line += f" ({r.reason})"
        print(line)
        for failure in r.failures:
            print(f"      tried {failure}")
    print(f"Result: {result.outcome.value}")


def cmd_detect(args):
    """Print the detected language tag."""
    tag = detect_language(args.text)
    print(f"{tag} ({language_name(tag)})")


def cmd_split(args):
    """Print the segments the text would be spoken as."""
    segments = split_segments(args.text)
    if not segments:
        print("No segments (empty text).")
        return
    for i, seg in enumerate(segments, start=1):
        print(f"  {i}. [{seg.language}] {seg.text}")


def cmd_voices(args):
    """List platform voices grouped by language."""
    service = VoiceService.default(offline=True)
    grouped = service.resolver.voices_by_language()
    if args.indic:
        wanted = {base_language(tag) for tag in INDIC_LANGUAGES} | {"ur"}
        grouped = {lang: names for lang, names in grouped.items() if lang in wanted}
    if args.filter:
        needle = args.filter.lower()
        grouped = {
            lang: [n for n in names if needle in n.lower()]
            for lang, names in grouped.items()
        }
        grouped = {lang: names for lang, names in grouped.items() if names}
    if not grouped:
        print("No matching voices found.")
        return
    print("Available voices:")
    for lang in sorted(grouped):
        print(f"  {lang}: {len(grouped[lang])}")
        for name in grouped[lang]:
            print(f"    {name}")


async def _speak_all(service: VoiceService, items: list[tuple[str, str | None]]) -> list[SpeechResult]:
    results = []
    try:
        for text, language in items:
            results.append(await service.speak(text, language))
    finally:
        await service.aclose()
    return results


def cmd_speak(args):
    """Speak text aloud."""
    if not args.text.strip():
        print("Error: Nothing to speak.", file=sys.stderr)
        raise SystemExit(1)
    service = VoiceService.default(offline=args.offline)
    print(f"Speaking: {args.text[:60]}")
    (result,) = asyncio.run(_speak_all(service, [(args.text, args.lang)]))
    _print_result(result)
    if result.outcome == Outcome.UNAVAILABLE:
        raise SystemExit(1)


def cmd_demo(args):
    """Speak one sample sentence per supported language."""
    service = VoiceService.default(offline=args.offline)
    total = len(DEMO_SENTENCES)
    print(f"Speaking {total} sample sentences...")
    results = asyncio.run(_speak_all(service, [(text, tag) for text, tag in DEMO_SENTENCES]))
    for i, ((text, tag), result) in enumerate(zip(DEMO_SENTENCES, results), start=1):
        print(f"  {i}/{total} {language_name(tag)}: {result.outcome.value}")


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="chat-voice",
        description="Multilingual speech output for chat assistants",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log cascade decisions")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # detect
    detect_parser = subparsers.add_parser("detect", help="Detect the language of a text")
    detect_parser.add_argument("text", help="Text to classify")
    detect_parser.set_defaults(func=cmd_detect)

    # split
    split_parser = subparsers.add_parser("split", help="Show single-language segments of a text")
    split_parser.add_argument("text", help="Text to split")
    split_parser.set_defaults(func=cmd_split)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List platform voices")
    voices_parser.add_argument("--filter", help="Filter voices by substring")
    voices_parser.add_argument("--indic", action="store_true", help="Only Indian-language voices")
    voices_parser.set_defaults(func=cmd_voices)

    # speak
    speak_parser = subparsers.add_parser("speak", help="Speak a text")
    speak_parser.add_argument("text", help="Text to speak")
    speak_parser.add_argument("--lang", help="Language tag; skips detection and splitting")
    speak_parser.add_argument("--offline", action="store_true", help="Platform voices only")
    speak_parser.set_defaults(func=cmd_speak)

    # demo
    demo_parser = subparsers.add_parser("demo", help="Speak a sample in every supported language")
    demo_parser.add_argument("--offline", action="store_true", help="Platform voices only")
    demo_parser.set_defaults(func=cmd_demo)

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return

    args.func(args)
