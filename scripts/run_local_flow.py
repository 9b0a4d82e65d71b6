#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP, no real backend unless API_BASE_URL is set).

Usage:
  python3 scripts/run_local_flow.py

What it does:
- Starts one booking flow for a boatyard through the same wiring the API uses
- Lets you pick services, a dock slot and a ship, then confirm
- Creates the payment and lets you paste checkout URLs to see how they settle
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from maritimehub.application.exceptions import MaritimeHubError, ReconciliationAmbiguous
from maritimehub.application.use_cases.booking_flow import BookingFlow
from maritimehub.application.use_cases.outcome_presenter import present_outcome, transfer_fields
from maritimehub.application.utils.formatting import format_vnd
from maritimehub.wiring.dependencies import get_catalog, get_flow_factory


def _print_header(flow: BookingFlow) -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print(f"flow_id: {flow.id}")
    print("Commands:")
    print("  /services            list services       /pick SVC1,SVC2")
    print("  /slots               list dock slots     /slot S1")
    print("  /ships [search]      list ships          /ship SH1")
    print("  /confirm             create the booking")
    print("  /pay [address]       create a payment    /url <checkout url>")
    print("  /paid                declare bank transfer done")
    print("  /close               close the payment page")
    print("  /draft  /new  /quit")
    print("-" * 60)


def _print_draft(flow: BookingFlow) -> None:
    draft = flow.draft
    print(f"stage: {flow.stage.value}")
    if draft is None:
        return
    print(f"services: {', '.join(s.name or s.id for s in draft.services) or '-'}")
    print(f"slot: {draft.slot.name if draft.slot else '-'}")
    print(f"ship: {draft.ship.name if draft.ship else '-'}")
    print(f"time: {draft.start_time or '-'} -> {draft.end_time or '-'}")
    print(f"total: {format_vnd(draft.total_price)}")


def _print_outcome(flow: BookingFlow) -> None:
    if flow.outcome is None:
        return
    screen = present_outcome(flow.outcome)
    print("\n--- Outcome ---")
    print(f"{screen.kind}: {screen.payload.get('message')}")
    print(f"actions: {', '.join(screen.actions)}")


def main() -> None:
    boatyard_id = sys.argv[1] if len(sys.argv) > 1 else "BY1"
    factory = get_flow_factory()
    catalog = get_catalog()
    flow = factory.start(boatyard_id)
    _print_header(flow)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return
        if not line:
            continue

        cmd, _, arg = line.partition(" ")
        arg = arg.strip()
        try:
            if cmd in ("/quit", "/exit"):
                flow.discard()
                print("Bye!")
                return
            elif cmd == "/new":
                flow.discard()
                flow = factory.start(boatyard_id)
                print(f"New flow_id: {flow.id}")
            elif cmd == "/services":
                for s in catalog.list_boatyard_services(boatyard_id):
                    print(f"  {s.id}: {s.name} ({format_vnd(s.price)})")
            elif cmd == "/slots":
                for s in catalog.list_dock_slots(boatyard_id):
                    print(f"  {s.id}: {s.name} [{s.assigned_from} .. {s.assigned_until}]")
            elif cmd == "/ships":
                for s in catalog.list_ships(arg or None):
                    print(f"  {s.id}: {s.name} ({s.code})")
            elif cmd == "/pick":
                flow.select_services_by_id([sid.strip() for sid in arg.split(",") if sid.strip()])
                _print_draft(flow)
            elif cmd == "/slot":
                flow.select_slot_by_id(arg)
                _print_draft(flow)
            elif cmd == "/ship":
                flow.select_ship_by_id(arg)
                _print_draft(flow)
            elif cmd == "/draft":
                _print_draft(flow)
            elif cmd == "/confirm":
                result = flow.confirm()
                print(f"next: {result.next_step}")
                if result.booking:
                    print(f"booking: {result.booking.id} ({result.booking.status})")
            elif cmd == "/pay":
                session = flow.start_payment(address=arg or None)
                print(f"payment session: {session.id} ({session.status.value})")
                for label, value in transfer_fields(session.instructions):
                    print(f"  {label}: {value}")
                if session.instructions.checkout_url:
                    print(f"  checkout: {flow.open_checkout()}")
            elif cmd == "/url":
                if flow.report_navigation(arg) is None:
                    print("(intermediate page)")
                _print_outcome(flow)
            elif cmd == "/paid":
                flow.declare_manual_payment()
                _print_outcome(flow)
            elif cmd == "/close":
                flow.close_payment()
                _print_outcome(flow)
            else:
                print("Unknown command. See the list above.")
        except ReconciliationAmbiguous as e:
            print(f"(unconfirmed) {e.message}")
        except MaritimeHubError as e:
            print(f"ERROR: {e.message}{' (retry possible)' if e.retryable else ''}")


if __name__ == "__main__":
    main()
