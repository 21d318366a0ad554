import requests
import json

from samples import SAMPLE_MESSAGES

BASE_URL = "http://localhost:8000"
API_KEY = "test_key_123"

def run_simulation():
    print("🚀 Running sample messages against the Spam Checker API")
    print("---------------------------------------------------")

    headers = {
        "x-api-key": API_KEY,
        "Content-Type": "application/json"
    }

    misses = 0
    for expected, messages in SAMPLE_MESSAGES.items():
        for text in messages:
            print(f"\n📩 [{expected}] {text[:60]}...")
            try:
                resp = requests.post(f"{BASE_URL}/api/classify", json={"message": text}, headers=headers)
                data = resp.json()
            except Exception as e:
                print(f"❌ Error: {e}")
                return

            verdict = data.get("verdict")
            mark = "✅" if verdict == expected else "⚠️"
            if verdict != expected:
                misses += 1
            print(f"{mark} {verdict} ({data.get('confidence')}%)")
            print(json.dumps(data.get("reasons"), indent=2))

    # Oversized message should be refused, not hang
    resp = requests.post(f"{BASE_URL}/api/classify", json={"message": "A" * 1_000_000}, headers=headers)
    print(f"\n📏 Oversized message -> HTTP {resp.status_code}")

    print(f"\n🔎 Done. {misses} sample(s) got an unexpected verdict.")

if __name__ == "__main__":
    run_simulation()
