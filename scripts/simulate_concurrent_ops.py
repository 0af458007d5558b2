"""Manual concurrency stress test script.

Fires many packing list generations at one batch at the same time and checks
that no box ends up on two packing lists.

Usage:
    python scripts/simulate_concurrent_ops.py

Prerequisites:
    - API server running on localhost:8000
"""

import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000/api"


def create_test_product(total_boxes: int = 100) -> dict:
    """Create a product with a single batch for simulation."""
    batch_no = f"SIM{int(time.time() * 1000) % 10_000_000:07d}"

    response = httpx.post(
        f"{BASE_URL}/products/",
        json={
            "name": f"Simulation product {batch_no}",
            "mfg_date": date.today().isoformat(),
            "exp_date": (date.today() + timedelta(days=730)).isoformat(),
            "quantity_per_box": "10x10",
            "gross_weight": 5.0,
            "net_weight": 4.5,
            "batches": [{"batch_no": batch_no, "box_from": 1, "box_to": total_boxes}],
        },
        timeout=10,
    )
    response.raise_for_status()
    return response.json()


def generate_packing_list(product_id: int, batch_no: str, qty: int, worker_id: int) -> dict:
    """Attempt to dispatch ``qty`` boxes on a new packing list."""
    try:
        response = httpx.post(
            f"{BASE_URL}/packing-lists/",
            json={
                "product_id": product_id,
                "pl_date": date.today().isoformat(),
                "batches": [{"batch_no": batch_no, "qty": qty}],
            },
            headers={"X-Correlation-ID": f"SIM-{worker_id:04d}"},
            timeout=10,
        )
        return {
            "worker_id": worker_id,
            "status_code": response.status_code,
            "success": response.status_code == 201,
            "body": response.json(),
        }
    except httpx.HTTPError as e:
        return {"worker_id": worker_id, "status_code": -1, "error": str(e), "success": False}


def find_overlaps(results: list[dict]) -> list[tuple[int, str]]:
    """Boxes that appear on more than one successful packing list."""
    owner: dict[int, str] = {}
    overlaps: list[tuple[int, str]] = []
    for result in results:
        if not result["success"]:
            continue
        pl_no = result["body"]["pl_no"]
        for batch in result["body"]["batches"]:
            for box_range in batch["ranges"]:
                for box in range(box_range["box_from"], box_range["box_to"] + 1):
                    if box in owner:
                        overlaps.append((box, pl_no))
                    owner[box] = pl_no
    return overlaps


def run_simulation(
    total_boxes: int = 100,
    qty_per_request: int = 15,
    num_workers: int = 10,
) -> None:
    """Run concurrent packing list generation simulation."""
    print(f"\n{'=' * 60}")
    print("Concurrent Dispatch Simulation")
    print(f"{'=' * 60}")
    print(f"Batch size: {total_boxes} boxes")
    print(f"Boxes per packing list: {qty_per_request}")
    print(f"Number of workers: {num_workers}")
    print(f"Expected max successes: {total_boxes // qty_per_request}")
    print(f"{'=' * 60}\n")

    print("Creating test product...")
    product = create_test_product(total_boxes=total_boxes)
    product_id = product["id"]
    batch_no = product["batches"][0]["batch_no"]
    print(f"Created product ID: {product_id} (batch: {batch_no})")

    print(f"\nLaunching {num_workers} concurrent generation requests...")
    start_time = time.time()
    results = []

    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        futures = {
            executor.submit(generate_packing_list, product_id, batch_no, qty_per_request, i): i
            for i in range(num_workers)
        }
        for future in as_completed(futures):
            results.append(future.result())

    elapsed = time.time() - start_time

    successes = [r for r in results if r["success"]]
    failures = [r for r in results if not r["success"]]
    conflicts = [r for r in results if r.get("status_code") == 409]
    overlaps = find_overlaps(results)

    print(f"\n{'=' * 60}")
    print(f"Results (completed in {elapsed:.2f}s):")
    print(f"  Packing lists created: {len(successes)}")
    print(f"  Rejected (409): {len(conflicts)}")
    print(f"  Other failures: {len(failures) - len(conflicts)}")

    dispatched = len(successes) * qty_per_request
    print(f"\n  Total dispatched: {dispatched} boxes")
    print(f"  Batch size: {total_boxes} boxes")
    print(f"  Integrity check: {'PASS' if dispatched <= total_boxes and not overlaps else 'FAIL'}")

    response = httpx.get(f"{BASE_URL}/products/{product_id}")
    final_batch = response.json()["batches"][0]
    print(f"  Dispatched count (API): {final_batch['dispatched_count']}")
    print(f"  Available ranges (API): {final_batch['available_ranges']}")
    print(f"{'=' * 60}\n")


if __name__ == "__main__":
    try:
        httpx.get(f"{BASE_URL.replace('/api', '')}/health", timeout=5).raise_for_status()
    except httpx.HTTPError:
        print(f"ERROR: Cannot connect to API at {BASE_URL.replace('/api', '')}")
        print("Make sure the API server is running: uvicorn packlist.main:app --reload")
        sys.exit(1)

    run_simulation(total_boxes=100, qty_per_request=15, num_workers=10)
    run_simulation(total_boxes=1000, qty_per_request=5, num_workers=50)
