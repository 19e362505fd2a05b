#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from one_liners.application import build_orchestrator
from one_liners.core.logging import configure_logging
from one_liners.core.settings import load_settings
from one_liners.domain import OneLinersError


def main() -> int:
    parser = argparse.ArgumentParser(description="Summarise the active entries of the configured form")
    parser.add_argument("--output", help="Write the JSON result to this file instead of stdout")
    args = parser.parse_args()

    settings = load_settings()
    configure_logging(settings.log_level, settings.log_format)
    orchestrator = build_orchestrator(settings)

    try:
        result = orchestrator.process_entries().as_dict()
    except OneLinersError as exc:
        print(json.dumps({"success": False, "error": exc.failure.as_dict()}, indent=2), file=sys.stderr)
        return 1

    payload = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        print(f"Batch result written to: {output}")
    else:
        print(payload)
    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
