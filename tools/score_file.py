# tools/score_file.py
from __future__ import annotations
import argparse, json, logging, sys
from pathlib import Path
from scoring_core.item_bank import load_items, load_responses
from scoring_core.result_export import result_row, to_csv, to_json
from scoring_core.scoring import score_items

def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Score a JSON file of items against a JSON file of responses.")
    ap.add_argument("items", help="JSON array of items (wire format)")
    ap.add_argument("responses", nargs="?", help="JSON array of responses; omit to score everything unanswered")
    ap.add_argument("--csv", action="store_true", help="emit CSV instead of JSON")
    ap.add_argument("--out", help="write to this file instead of stdout")
    ap.add_argument("--trace", action="store_true", help="log one trace line per item")
    a = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    if a.trace:
        from scoring_core import config
        config.DEBUG_TRACE = True

    try:
        items = load_items(a.items)
        responses = load_responses(a.responses) if a.responses else []
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    rows = [result_row(it, res) for it, res in zip(items, score_items(items, responses))]
    body = to_csv(rows) if a.csv else json.dumps(to_json(rows), indent=2)
    if a.out:
        Path(a.out).write_text(body if body.endswith("\n") else body + "\n", encoding="utf-8")
        logging.info("wrote %d results to %s", len(rows), a.out)
    else:
        print(body)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
