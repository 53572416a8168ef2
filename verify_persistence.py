import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"

ROUTE = {
    "origin_city": "London",
    "origin_country": "United Kingdom",
    "destination_city": "Paris",
    "destination_country": "France",
}


def start_server():
    return subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "crm_backend.app.main:app", "--host", "127.0.0.1", "--port", "8000"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "DB_ECHO": "True"}
    )


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server()

    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stdout:", server_logs[0].decode())
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")

        # 2. Create Route Interest
        print("\n--- [Step 2] Creating Route Interest (Persistence Test) ---")
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/route-interests", json=ROUTE)

        if resp.status_code == 200:
            print("⚠️ Route interest already exists (persistence working from previous run?)")
        elif resp.status_code == 201:
            print("✅ Route Interest Created")
        else:
            print(f"❌ Create Failed: {resp.status_code} {resp.text}")
            raise Exception("Route interest creation failed")
        route_id = resp.json()["data"]["id"]
        print(resp.json())

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)

    time.sleep(2)  # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = start_server()

    try:
        if not wait_for_server():
            raise Exception("Server restart failed")

        # 4. Fetch by id
        print("\n--- [Step 5] Fetching Route Interest (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/route-interests/{route_id}")
        if resp.status_code != 200:
            print(f"❌ Fetch Failed (Persistence Issue?): {resp.status_code} {resp.text}")
            raise Exception("Route interest missing after restart")
        print("✅ Route Interest Persisted")
        print(resp.json())

        # 5. Resubmitting the same route must reuse the row
        print("\n--- [Step 6] Verifying Idempotent Create ---")
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/route-interests", json=ROUTE)
        if resp.status_code == 200 and resp.json()["data"]["id"] == route_id:
            print("✅ Existing route reused")
        else:
            print(f"❌ Unexpected response: {resp.status_code} {resp.text}")

        # 6. Autocomplete sees both ends
        print("\n--- [Step 7] Verifying City Autocomplete ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/route-interests/cities", params={"q": "par"})
        print(resp.json())

    finally:
        print("\n--- [Step 8] Stopping Server ---")
        stop_server(proc2)


if __name__ == "__main__":
    run_verification()
