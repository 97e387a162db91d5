# ayalon_skill/cli_run.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from ayalon_skill.core.config import load_settings
from ayalon_skill.exceptions import ConfigError, MalformedBatchError
from ayalon_skill.infra.yaml_io import save_yaml
from ayalon_skill.services.enrichment_service import enrich_batch


def _single_text_batch(text: str, record_id: str) -> Dict[str, Any]:
    return {"values": [{"recordId": record_id, "data": {"document": text}}]}


def _write_output(path: Path, response: Dict[str, Any]) -> None:
    if path.suffix.lower() in (".yaml", ".yml"):
        save_yaml(path, response)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(response, ensure_ascii=False, indent=2), encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Run the entity search enrichment on a batch file or a single text.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", type=Path, help="skill request JSON ({\"values\": [...]})")
    src.add_argument("--text", help="enrich a single ad-hoc document")
    ap.add_argument("--record-id", default="1", help="recordId used with --text")
    ap.add_argument("--output", type=Path, default=None, help="write the response to .json or .yaml instead of stdout")
    ap.add_argument("--config", default=None, help="YAML settings override file")
    ap.add_argument("--concurrency", type=int, default=None, help="max records enriched at once")
    args = ap.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        ap.exit(2, f"config error: {e}\n")

    if args.concurrency is not None:
        settings = replace(settings, max_concurrency=max(1, args.concurrency))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    if args.text is not None:
        body: Any = _single_text_batch(args.text, args.record_id)
    else:
        try:
            body = json.loads(args.input.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            ap.exit(2, f"could not read {args.input}: {e}\n")

    try:
        response = asyncio.run(enrich_batch(body, settings))
    except MalformedBatchError as e:
        ap.exit(2, f"malformed batch: {e}\n")

    if args.output is not None:
        _write_output(args.output, response)
    else:
        json.dump(response, sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")


if __name__ == "__main__":
    main()
