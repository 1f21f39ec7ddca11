"""
Order Simulation Script

Runs pre-flight checks against a running server, then fires a burst of
concurrent random orders and verifies each one reads back correctly.
Run from project root: python scripts/simulate.py --orders 50
"""

import argparse
import asyncio
import random
import sys
import time
from typing import Any

import httpx

API_BASE_URL = "http://localhost:3001"

# Sample data for random orders
FIRST_NAMES = ["John", "Jane", "Mike", "Sarah", "Tom", "Emma", "David", "Lisa", "Chris", "Amy"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis"]
STREETS = ["Main St", "Broadway", "5th Avenue", "Park Ave", "Madison Ave", "Lexington Ave"]
PLATFORMS = ["UberEats", "DoorDash", "Grubhub"]


def generate_random_customer() -> dict[str, str]:
    """Generate random customer info."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    return {
        "name": f"{first} {last}",
        "email": f"{first.lower()}.{last.lower()}@example.com",
        "phone": f"555-{random.randint(100, 999)}-{random.randint(1000, 9999)}",
        "address": f"{random.randint(1, 999)} {random.choice(STREETS)}",
    }


def generate_order_payload(menu_item_ids: list[str]) -> dict[str, Any]:
    """Generate payload for the /api/orders endpoint."""
    items = [
        {"menu_item_id": random.choice(menu_item_ids), "quantity": random.randint(1, 3)}
        for _ in range(random.randint(1, 4))
    ]
    return {
        "customer": generate_random_customer(),
        "items": items,
        "delivery_platform": random.choice(PLATFORMS),
    }


async def load_menu_item_ids(client: httpx.AsyncClient, base_url: str) -> list[str]:
    """Collect every available menu item id across all restaurants."""
    response = await client.get(f"{base_url}/api/restaurants")
    response.raise_for_status()

    item_ids = []
    for restaurant in response.json()["restaurants"]:
        menu = await client.get(f"{base_url}/api/restaurants/{restaurant['id']}/menu")
        menu.raise_for_status()
        for items in menu.json()["menu"].values():
            item_ids.extend(item["id"] for item in items)
    return item_ids


async def send_order(
    client: httpx.AsyncClient,
    base_url: str,
    order_num: int,
    menu_item_ids: list[str],
) -> dict[str, Any]:
    """Create one order and read it back."""
    payload = generate_order_payload(menu_item_ids)
    start_time = time.time()

    try:
        response = await client.post(f"{base_url}/api/orders", json=payload, timeout=30.0)
        elapsed = round(time.time() - start_time, 3)

        if response.status_code != 200:
            return {
                "order_num": order_num,
                "success": False,
                "error": response.text[:100],
                "time": elapsed,
            }

        data = response.json()
        detail = await client.get(f"{base_url}/api/orders/{data['order_id']}")
        stored_items = detail.json()["order"]["items"] if detail.status_code == 200 else []

        return {
            "order_num": order_num,
            "success": len(stored_items) == len(payload["items"]),
            "order_id": data["order_id"],
            "total": data["total_amount"],
            "time": elapsed,
            "error": None if len(stored_items) == len(payload["items"]) else "item count mismatch",
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


# =============================================================================
# PRE-FLIGHT CHECKS
# =============================================================================

async def run_preflight_checks(base_url: str) -> bool:
    """Check each endpoint once before the burst."""
    print("=" * 70)
    print("🔍 PRE-FLIGHT CHECKS")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        print("\n1️⃣ Health Check...")
        try:
            response = await client.get(f"{base_url}/api/health", timeout=5.0)
        except httpx.HTTPError as e:
            print(f"   ❌ Server unreachable: {e}")
            return False
        print(f"   ✅ {response.json().get('message')}")

        print("\n2️⃣ Restaurants...")
        response = await client.get(f"{base_url}/api/restaurants")
        restaurants = response.json().get("restaurants", [])
        print(f"   ✅ {len(restaurants)} restaurant(s)")
        if not restaurants:
            print("   ❌ Catalog is empty, seed it first: python -m food_ordering.seed")
            return False

        print("\n3️⃣ Menus...")
        menu_item_ids = await load_menu_item_ids(client, base_url)
        print(f"   ✅ {len(menu_item_ids)} available menu item(s)")
        if not menu_item_ids:
            return False

        print("\n4️⃣ Single Order...")
        result = await send_order(client, base_url, 0, menu_item_ids)
        if not result["success"]:
            print(f"   ❌ Failed: {result['error']}")
            return False
        print(f"   ✅ Order {result['order_id']} created, total ${result['total']}")

        print("\n5️⃣ Unknown Menu Item...")
        payload = generate_order_payload(["does-not-exist"])
        response = await client.post(f"{base_url}/api/orders", json=payload)
        if response.status_code == 404:
            print(f"   ✅ Rejected: {response.json().get('error')}")
        else:
            print(f"   ❌ Expected 404, got {response.status_code}")
            return False

    print("\n" + "=" * 70)
    return True


# =============================================================================
# SIMULATION
# =============================================================================

async def run_simulation(base_url: str, total_orders: int) -> None:
    print("=" * 70)
    print(f"🚀 SIMULATING {total_orders} CONCURRENT ORDERS")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        menu_item_ids = await load_menu_item_ids(client, base_url)
        start_time = time.time()
        results = await asyncio.gather(*[
            send_order(client, base_url, n, menu_item_ids)
            for n in range(1, total_orders + 1)
        ])
        elapsed = round(time.time() - start_time, 2)

    succeeded = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    avg_time = sum(r["time"] for r in results) / len(results) if results else 0.0

    print(f"\n📊 RESULTS ({elapsed}s total)")
    print(f"   Succeeded: {len(succeeded)}")
    print(f"   Failed:    {len(failed)}")
    print(f"   Avg time:  {avg_time:.3f}s")
    print(f"   Revenue:   ${sum(r['total'] for r in succeeded):.2f}")

    for r in failed[:10]:
        print(f"   ⚠️ #{r['order_num']}: {r['error']}")
    print("=" * 70)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Simulation Script")
    parser.add_argument("--base-url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--orders", type=int, default=50, help="Number of orders")
    parser.add_argument("--skip-tests", action="store_true", help="Skip pre-flight checks")
    args = parser.parse_args()

    if not args.skip_tests:
        if not asyncio.run(run_preflight_checks(args.base_url)):
            print("\n❌ Pre-flight checks failed. Fix issues before running simulation.")
            sys.exit(1)
        print("\n✅ Pre-flight checks passed!")

    asyncio.run(run_simulation(args.base_url, args.orders))
