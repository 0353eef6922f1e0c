# populate_db.py

import requests

# API endpoint for adding heirs to the roster
API_URL = "http://127.0.0.1:8000/heirs/"

# Default roster of the estate ledger: two wives, seven daughters, seven sons
heirs_data = (
    [{"name": f"Wife {i}", "relationship": "Spouse", "heirGroup": "Wives", "portions": 1.5} for i in (1, 2)]
    + [{"name": f"Daughter {i}", "relationship": "Child", "heirGroup": "Daughters", "portions": 3} for i in range(1, 8)]
    + [{"name": f"Son {i}", "relationship": "Child", "heirGroup": "Sons", "portions": 6} for i in range(1, 8)]
)

def populate_database(api_url: str = API_URL) -> int:
    """Post every default heir; returns how many were created."""
    print("Seeding the heir roster...")
    created = 0
    for heir in heirs_data:
        try:
            response = requests.post(api_url, json=heir, timeout=10)

            if response.status_code == 200:
                created += 1
                print(f"  [OK] Added: {heir['name']}")
            elif response.status_code == 400:
                # 400 means the name is already on the roster
                print(f"  [INFO] '{heir['name']}' already exists, skipped.")
            else:
                print(f"  [ERROR] Could not add {heir['name']}. Status: {response.status_code}, Message: {response.text}")

        except requests.exceptions.ConnectionError as e:
            print("\n[ERROR] Could not reach the server. Make sure Uvicorn is running.")
            print(f"Detail: {e}")
            break
    print("\nDone.")
    return created

if __name__ == "__main__":
    populate_database()
