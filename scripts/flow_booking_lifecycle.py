#!/usr/bin/env python3
"""
Booking lifecycle flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_booking_lifecycle.py --booking-id 12 --provider-id 3 --user-id 7
    python scripts/flow_booking_lifecycle.py --booking-id 12 --provider-id 3 --user-id 7 --reject "Work not finished"
    python scripts/flow_booking_lifecycle.py --booking-id 12 --provider-id 3 --cancel "Customer unavailable"

Flow:
    1. List provider bookings (pending only)
    2. Accept booking (as provider)
    3. Request completion (as provider)
    4. Confirm or reject completion (as user)
    5. List provider bookings in the provider's currency
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"


def api_request(
    method: str,
    endpoint: str,
    data: dict | None = None,
    params: dict | None = None,
    headers: dict | None = None,
) -> dict:
    """Make an API request."""
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, params=params, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, json=data or {}, headers=headers, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    data = result["data"]
    if fields and isinstance(data, dict):
        data = {k: data.get(k) for k in fields if k in data}
    print(json.dumps(data, indent=2))
    return True


def transition(booking_id: int, action: str, actor_role: str, actor_id: int | None, reason: str | None = None) -> dict:
    """Request a booking transition."""
    result = api_request("POST", f"/api/v1/bookings/{booking_id}/transition", {
        "action": action,
        "actor_role": actor_role,
        "actor_id": actor_id,
        "reason": reason,
    })
    if result["status"] < 400:
        result["data"] = result["data"]["booking"]
    return result


def list_bookings(provider_id: int, status: int | None = None) -> dict:
    """List a provider's bookings as that provider."""
    params = {"provider_id": provider_id}
    if status is not None:
        params["status"] = status
    return api_request(
        "GET",
        "/api/v1/bookings/",
        params=params,
        headers={"X-Viewer-Role": "provider", "X-Viewer-Id": str(provider_id)},
    )


def print_listing(result: dict) -> bool:
    if result["status"] >= 400:
        return print_result(result)
    data = result["data"]
    print(f"{data['total']} booking(s), shown in {data['display_currency_code']}")
    for view in data["bookings"]:
        print(
            f"  #{view['id']:<6} {view['status_label']:<32} "
            f"{view['formatted_amount']:>12}  {view['counterpart']['name']}"
        )
    return True


def main():
    parser = argparse.ArgumentParser(description="Booking lifecycle flow")
    parser.add_argument("--booking-id", type=int, required=True, help="Pending booking ID")
    parser.add_argument("--provider-id", type=int, required=True, help="Provider owning the booking")
    parser.add_argument("--user-id", type=int, help="User who made the booking")
    parser.add_argument("--cancel", metavar="REASON", help="Cancel instead of accepting")
    parser.add_argument("--reject", metavar="REASON", help="User rejects the completion request")
    args = parser.parse_args()

    # Step 1: Pending bookings
    print_step(1, "List pending bookings")
    if not print_listing(list_bookings(args.provider_id, status=1)):
        sys.exit(1)

    if args.cancel:
        print_step(2, "Cancel booking (as provider)")
        result = transition(args.booking_id, "cancel", "provider", args.provider_id, args.cancel)
        if not print_result(result, ["id", "status", "status_label", "reason"]):
            sys.exit(1)
        print("\nBooking CANCELLED")
        return

    # Step 2: Accept
    print_step(2, "Accept booking (as provider)")
    result = transition(args.booking_id, "accept", "provider", args.provider_id)
    if not print_result(result, ["id", "status", "status_label"]):
        sys.exit(1)

    # Step 3: Request completion
    print_step(3, "Request completion (as provider)")
    result = transition(args.booking_id, "request_completion", "provider", args.provider_id)
    if not print_result(result, ["id", "status", "status_label"]):
        sys.exit(1)

    # Step 4: User decision
    if args.reject:
        print_step(4, "Reject completion (as user)")
        result = transition(args.booking_id, "user_reject", "user", args.user_id, args.reject)
    else:
        print_step(4, "Confirm completion (as user)")
        result = transition(args.booking_id, "user_confirm", "user", args.user_id)
    if not print_result(result, ["id", "status", "status_label", "reason"]):
        sys.exit(1)

    # Step 5: Final listing
    print_step(5, "List all bookings")
    if not print_listing(list_bookings(args.provider_id)):
        sys.exit(1)

    print("\n" + "="*60)
    print("FLOW COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
