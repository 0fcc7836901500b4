"""
Smoke test for the Water Meter Analytics API.
Run this while the server is running in a separate terminal.

    python scripts/smoke_test_api.py [base_url]
"""
import sys
import requests

BASE_URL = "http://localhost:3000/api"


def test_endpoint(name, url, params=None, expect_status=200):
    """Call an endpoint and print a short summary. Returns True on the expected status."""
    print(f"\n{'='*60}")
    print(f"Testing: {name}")
    print(f"URL: {url}")
    if params:
        print(f"Params: {params}")
    print("-" * 60)

    try:
        r = requests.get(url, params=params, timeout=10)
    except requests.RequestException as e:
        print(f"❌ Exception: {e}")
        return False

    if r.status_code != expect_status:
        print(f"❌ Error {r.status_code}: {r.text[:200]}")
        return False

    data = r.json()
    if isinstance(data, list):
        first = data[0] if data else None
        print(f"✅ Success! {len(data)} items, first: {first}")
    elif isinstance(data, dict):
        print(f"✅ Success! Keys: {list(data.keys())}")
        for key in list(data.keys())[:4]:
            val = data[key]
            if isinstance(val, list):
                print(f"  - {key}: {len(val)} items")
            else:
                print(f"  - {key}: {val}")
    return True


def first_id(url):
    """First ``id`` from a selector list, or None."""
    try:
        items = requests.get(url, timeout=10).json()
    except (requests.RequestException, ValueError):
        return None
    return items[0]["id"] if isinstance(items, list) and items else None


def main():
    base = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else BASE_URL
    print("🧪 Testing Water Meter Analytics API Endpoints")
    print("=" * 60)

    results = [
        test_endpoint("Health", f"{base}/health"),
        test_endpoint("Database", f"{base}/test-db"),
        test_endpoint("Years", f"{base}/years"),
        test_endpoint("Divisions", f"{base}/divisions"),
        test_endpoint("Industries", f"{base}/industries"),
        test_endpoint("Months", f"{base}/months"),
        test_endpoint("Stats", f"{base}/stats"),
        test_endpoint("All data (page 1)", f"{base}/alldata", {"page": 0, "pageSize": 20}),
        test_endpoint("Chart 1 without params", f"{base}/chart1", expect_status=400),
        test_endpoint("Unknown endpoint", f"{base}/does-not-exist", expect_status=404),
    ]

    year = first_id(f"{base}/years")
    division = first_id(f"{base}/divisions")
    industry = first_id(f"{base}/industries")

    if year and division:
        results.append(test_endpoint("Chart 1", f"{base}/chart1", {"division": division, "financial_year": year}))
        results.append(test_endpoint("Chart 6", f"{base}/chart6", {"division": division, "financial_year": year}))
    if year:
        results.append(test_endpoint("Chart 2", f"{base}/chart2", {"financial_year": year}))
    if industry:
        results.append(test_endpoint("Chart 3", f"{base}/chart3", {"industry": industry}))
        results.append(test_endpoint("Chart 4", f"{base}/chart4", {"industry": industry}))
        results.append(test_endpoint("Chart 5 (all years)", f"{base}/chart5", {"industry": industry, "financial_year": "all"}))

    print("\n" + "=" * 60)
    print(f"🏁 Testing Complete! {sum(results)}/{len(results)} passed")
    print("=" * 60)
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
