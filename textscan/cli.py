from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from textscan.core.config import get_settings
from textscan.core.errors import DetectorError
from textscan.core.logging import configure_logging
from textscan.services.batch import analyze_batch
from textscan.services.credentials import validate_credential
from textscan.services.detector import analyze_text
from textscan.services.text_metrics import compute_stats
from textscan.utils.text import preprocess_text, split_lines


def _add_key_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--api-key", default=None, help="OpenAI API key. Defaults to OPENAI_API_KEY.")


def _add_mode_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        choices=["enhanced", "standard"],
        default="enhanced",
        help="'enhanced' adds preprocessing, embedding scoring and a validation score.",
    )


def _load_text(text: str | None, input_file: str | None) -> str:
    if text and input_file:
        raise ValueError("Use either --text or --input-file, not both.")
    if not text and not input_file:
        raise ValueError("Provide --text or --input-file.")
    if text:
        return text
    return Path(input_file).read_text(encoding="utf-8")


def _resolve_key(value: str | None) -> str:
    return value if value is not None else get_settings().openai_api_key


def _print_json(payload: object) -> None:
    print(json.dumps(payload, ensure_ascii=True, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textscan",
        description="Estimate whether text was written by a human or generated by a language model.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_analyze = sub.add_parser("analyze", help="Analyze a single text.")
    p_analyze.add_argument("--text", default=None, help="Text to analyze.")
    p_analyze.add_argument("--input-file", default=None, help="Read the text from this file.")
    _add_mode_args(p_analyze)
    _add_key_args(p_analyze)

    p_batch = sub.add_parser("batch", help="Analyze a file with one text per line.")
    p_batch.add_argument("--input-file", required=True, help="File with one text per line; blank lines are skipped.")
    p_batch.add_argument("--output-jsonl", default=None, help="Also write one JSON result per line here.")
    _add_mode_args(p_batch)
    _add_key_args(p_batch)

    p_validate = sub.add_parser("validate-key", help="Check that an API key is accepted.")
    _add_key_args(p_validate)

    p_stats = sub.add_parser("stats", help="Compute local text statistics without any API call.")
    p_stats.add_argument("--text", default=None, help="Text to measure.")
    p_stats.add_argument("--input-file", default=None, help="Read the text from this file.")

    return parser


def _save_jsonl(rows: list[dict], path: str | Path) -> None:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as handle:
        for row in rows:
            handle.write(json.dumps(row, ensure_ascii=True) + "\n")


def _progress(done: int, total: int) -> None:
    print(f"analyzed {done}/{total}", file=sys.stderr)


async def _run(args: argparse.Namespace) -> int:
    if args.command == "stats":
        stats = compute_stats(preprocess_text(_load_text(args.text, args.input_file)))
        _print_json(stats.to_dict())
        return 0

    if args.command == "validate-key":
        valid = await validate_credential(_resolve_key(args.api_key))
        _print_json({"valid": valid})
        return 0 if valid else 1

    if args.command == "analyze":
        result = await analyze_text(
            _load_text(args.text, args.input_file),
            _resolve_key(args.api_key),
            mode=args.mode,
        )
        _print_json(result.model_dump(mode="json"))
        return 0

    if args.command == "batch":
        texts = split_lines(Path(args.input_file).read_text(encoding="utf-8"))
        results = await analyze_batch(texts, _resolve_key(args.api_key), mode=args.mode, on_progress=_progress)
        rows = [item.model_dump(mode="json") for item in results]
        if args.output_jsonl:
            _save_jsonl(rows, args.output_jsonl)
        _print_json(rows)
        return 0

    raise RuntimeError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(stream=sys.stderr)
    try:
        return asyncio.run(_run(args))
    except (DetectorError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
