#!/usr/bin/env python3
"""Audit a brand name against the knowledge graph from the terminal.

    python main.py "Acme Realty"          # human-readable report
    python main.py "Acme Realty" --json   # the same view the page renders
    python main.py --serve                # run the web app
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from config import settings
from search.errors import SearchError
from search.knowledge_graph import search_entity
from search.models import AuditView
from search.presentation import build_view, error_view
from search.scoring import ScoringConfig

logger = logging.getLogger(__name__)


def format_report(view: AuditView) -> str:
    if view.status == "error":
        return f"Error: {view.error_message}"
    lines = [
        f"Query:   {view.query}",
        f"Status:  {view.status}",
        f"Score:   {view.display_score} ({view.band})",
        view.headline,
        view.message,
    ]
    r = view.result
    if r is not None:
        lines.append(f"Name:    {r.name}")
        if r.entity_id:
            lines.append(f"Entity:  {r.entity_id}")
        if r.types:
            lines.append(f"Types:   {', '.join(r.types)}")
        if r.description:
            lines.append(f"About:   {r.description}")
        if r.url:
            lines.append(f"URL:     {r.url}")
        if r.location:
            lines.append(f"Where:   {r.location}")
    return "\n".join(lines)


def run_audit(query: str, config: Optional[ScoringConfig] = None) -> AuditView:
    try:
        outcome = search_entity(query)
    except SearchError as e:
        logger.warning(f"Audit of '{query}' failed: {e.message}")
        return error_view(e.message, query=query)
    return build_view(outcome, config or ScoringConfig.from_settings())


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check how the knowledge graph sees a brand name.")
    parser.add_argument("name", nargs="?", help="brand or agency name to audit")
    parser.add_argument("--json", action="store_true", help="print the audit view as JSON")
    parser.add_argument("--serve", action="store_true", help="run the web app instead")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)

    if args.serve:
        from app import app
        app.run(host=settings.HOST, port=settings.PORT)
        return 0
    if args.name is None:
        parser.error("a brand name is required unless --serve is given")

    view = run_audit(args.name)
    if args.json:
        print(json.dumps(view.to_payload(), indent=2))
    else:
        print(format_report(view))
    return 1 if view.status == "error" else 0


if __name__ == '__main__':
    sys.exit(main())
