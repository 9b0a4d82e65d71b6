#!/usr/bin/env python3
"""Smoke script for the booking flow API endpoints against a running server."""

import sys

import httpx


BASE_URL = "http://127.0.0.1:8001"
PAID_URL = "https://app.local/payment/result?code=00&cancel=false&status=PAID&orderCode=1"


def _call(method: str, path: str, **kwargs):
    response = httpx.request(method, f"{BASE_URL}/api/v1{path}", timeout=30.0, **kwargs)
    response.raise_for_status()
    return response.json() if response.content else None


def test_booking(boatyard_id: str = "BY1") -> str | None:
    """Walk one flow from selection to a created booking."""
    print("=" * 60)
    print("Testing booking flow")
    print("=" * 60)

    try:
        flow = _call("POST", "/flows", json={"boatyardId": boatyard_id})
        token = flow["flowId"]
        services = _call("GET", f"/flows/{token}/services")
        slots = _call("GET", f"/flows/{token}/dock-slots")
        ships = _call("GET", "/ships")
        print(f"✅ Flow {token}: {len(services)} services, {len(slots)} slots, {len(ships)} ships")

        _call("PUT", f"/flows/{token}/services", json={"serviceIds": [services[0]["id"]]})
        _call("PUT", f"/flows/{token}/slot", json={"slotId": slots[0]["id"]})
        _call("PUT", f"/flows/{token}/ship", json={"shipId": ships[0]["id"]})
        result = _call("POST", f"/flows/{token}/confirm")
        booking = result["flow"]["booking"]
        print(f"✅ Booking {booking['id']} ({booking['status']}), next step: {result['nextStep']}")
        return token
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None
    except Exception as e:
        print(f"❌ Error: {e}")
        return None


def test_payment(token: str | None) -> bool:
    """Create a payment and settle it with a PAID return URL."""
    print("\n" + "=" * 60)
    print("Testing payment")
    print("=" * 60)

    if not token:
        print("⚠️  No flow token from booking, skipping")
        return False

    try:
        flow = _call("POST", f"/flows/{token}/payment")
        payment = flow["payment"]
        print(f"✅ Payment {payment['sessionId']}: {payment['amountLabel']}")
        for field in payment["transferFields"]:
            print(f"    {field['label']}: {field['value']}")

        result = _call("POST", f"/flows/{token}/payment/navigation", json={"url": PAID_URL})
        print(f"✅ Outcome: {result['outcome']['kind']} - {result['outcome']['payload']['message']}")
        return True
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return False
    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def main():
    """Run all checks."""
    print("\n🚀 Testing Booking Flow API\n")

    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
        print("✅ Server is running\n")
    except Exception:
        print("❌ Server is not running!")
        print("   Please start it with: uvicorn maritimehub.main:app --reload --port 8001")
        sys.exit(1)

    token = test_booking()
    test_payment(token)

    print("\n" + "=" * 60)
    print("✅ Checks complete!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
