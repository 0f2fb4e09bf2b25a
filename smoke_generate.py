import requests
import json

BASE_URL = "http://127.0.0.1:8000"

# --- sample request ---
payload = {
    "destination": "Paris, France",
    "startDate": "2025-07-10",
    "endDate": "2025-07-14",
    "totalBudget": 1500,
    "preferences": {
        "accommodation": "mid-range",
        "food": "local",
        "activities": ["sightseeing", "cultural"]
    }
}

def run_smoke():
    url = f"{BASE_URL}/api/generate-itinerary"
    headers = {"Content-Type": "application/json"}

    print(f"➡️ Sending POST {url}")
    print(json.dumps(payload, indent=2))

    resp = requests.post(url, headers=headers, json=payload)

    print(f"\n⬅️ Status: {resp.status_code}")
    try:
        data = resp.json()
    except ValueError:
        print(resp.text)
        return
    print(json.dumps(data, indent=2))

    if resp.status_code == 200:
        saved = requests.post(f"{BASE_URL}/api/save-itinerary", headers=headers, json={"itineraryData": data})
        print(f"\n⬅️ Saved with status {saved.status_code}: id={saved.json().get('id')}")

if __name__ == "__main__":
    run_smoke()
