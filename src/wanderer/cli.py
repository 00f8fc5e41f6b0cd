"""
Wanderer CLI entrypoint.

This CLI is intended for quick local demos and operations without a frontend.
It delegates to the same components as the API (`wanderer.itinerary`, `wanderer.email`).
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from wanderer.config.settings import get_settings
from wanderer.core.logging import configure_logging
from wanderer.email.verification import build_verification_link, render_verification_email
from wanderer.itinerary.flow import FlowState, ItineraryCreationFlow
from wanderer.recommender.select import rank_spots
from wanderer.scoring.explain import one_line_summary
from wanderer.store.supabase import SupabaseStore


def _cmd_recommend(args: argparse.Namespace) -> int:
    """Handle the `recommend` subcommand."""
    settings = get_settings()
    store = SupabaseStore(settings)
    flow = ItineraryCreationFlow(store, args.user_id)
    flow.open()
    for n in flow.notifications:
        print(f"[{n.level}] {n.message}")

    limit = int(args.limit or settings.selection.auto_select_count)
    ranked = rank_spots(flow.spots, flow.preferences)[:limit]

    if args.json:
        print(json.dumps([s.model_dump(mode="json") for _, s in ranked], ensure_ascii=False, indent=2))
        return 0

    print("Top spots:")
    for i, (spot, score) in enumerate(ranked, start=1):
        print(f"{i:>2}. {spot.name} ({spot.municipality or spot.location})  {one_line_summary(score)}")
        if score.reasons:
            print(f"    - {'; '.join(score.reasons[:3])}")
    return 0


def _cmd_create_itinerary(args: argparse.Namespace) -> int:
    """Handle the `create-itinerary` subcommand (manual spot IDs and/or auto-select)."""
    settings = get_settings()
    store = SupabaseStore(settings)
    flow = ItineraryCreationFlow(store, args.user_id, auto_select_count=settings.selection.auto_select_count)
    flow.open()
    flow.set_name(args.name)
    if args.auto:
        flow.auto_select()
    for spot_id in args.spot_id:
        flow.toggle_spot(spot_id)
    flow.submit()

    for n in flow.notifications:
        print(f"[{n.level}] {n.message}")
    if flow.state is FlowState.CREATED:
        if flow.created_id:
            print(f"id: {flow.created_id}")
        return 0
    return 1


def _cmd_render_email(args: argparse.Namespace) -> int:
    settings = get_settings()
    link = build_verification_link(
        args.base_url or settings.email.verify_base_url or settings.store.url,
        token_hash=args.token_hash,
        action=args.action,
        redirect_to=args.redirect_to,
    )
    print(render_verification_email(verification_link=link, token=args.token, app_name=settings.app.name))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the Wanderer CLI."""
    parser = argparse.ArgumentParser(prog="wanderer")
    sub = parser.add_subparsers(dest="command", required=True)

    rec = sub.add_parser("recommend", help="Rank tourist spots for a user's preferences.")
    rec.add_argument("--user-id", required=True)
    rec.add_argument("--limit", type=int, default=None)
    rec.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rec.set_defaults(func=_cmd_recommend)

    create = sub.add_parser("create-itinerary", help="Create a named itinerary.")
    create.add_argument("--user-id", required=True)
    create.add_argument("--name", required=True)
    create.add_argument("--spot-id", action="append", default=[], help="Repeatable. Toggles a spot.")
    create.add_argument("--auto", action="store_true", help="Start from the auto-selected top spots.")
    create.set_defaults(func=_cmd_create_itinerary)

    email = sub.add_parser("render-email", help="Print the verification email HTML.")
    email.add_argument("--token", required=True)
    email.add_argument("--token-hash", required=True)
    email.add_argument("--action", default="signup")
    email.add_argument("--redirect-to", default="")
    email.add_argument("--base-url", default=None)
    email.set_defaults(func=_cmd_render_email)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m wanderer.cli`."""
    configure_logging(get_settings())
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
