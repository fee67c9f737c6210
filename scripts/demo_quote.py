"""Build a quote from a preset template, tweak it and print the totals.

Usage:
  python scripts/demo_quote.py [template_id]

Examples:
  python scripts/demo_quote.py
  python scripts/demo_quote.py event-live
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Optional

from quote_engine.quote.editor import QuoteEditor
from quote_engine.quote.records import export_calculation
from quote_engine.schemas.quote import MasterItem


async def run(template_id: str) -> dict:
    editor = QuoteEditor(debounce=0.05)
    editor.apply_template(template_id)
    editor.update_quote({"customer_name_snapshot": "데모 고객", "discount_amount": 100000})
    editor.add_detail_from_master(0, 0, MasterItem(name="자막 제작", default_unit_price=150000))
    editor.update_detail(0, 0, 0, {"cost_price": 200000})
    await asyncio.sleep(editor.scheduler.debounce * 2)
    return {
        "project_title": editor.quote.project_title,
        "runs": editor.scheduler.runs,
        **export_calculation(editor.calculate_now()),
    }


def main(argv: Optional[list[str]] = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    template_id = argv[0] if argv else "promo-video"
    print(json.dumps(asyncio.run(run(template_id)), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
