import sys
import random
import requests

NAMES = ["Cherry Tomato", "Beefsteak Tomato", "Roma Tomato", "Heirloom Tomato", "Grape Tomato"]
VARIETIES = ["Sweet 100", "Big Beef", "San Marzano", "Brandywine", "Juliet"]

def generate_tomato():
    index = random.randrange(len(NAMES))
    return {
        "name": NAMES[index],
        "variety": VARIETIES[index],
        "price": round(random.uniform(1, 10), 2),
        "description": f"Fresh {NAMES[index].lower()}",
        "inStock": random.random() > 0.2,
    }

def create_tomato(base_url, payload):
    url = f"http://{base_url}/tomatoes"

    try:
        response = requests.post(url, json=payload)
        response.raise_for_status()
        data = response.json()["data"]
        print(f"✅ Created tomato: {data['name']} (ID: {data['id']})")
    except requests.HTTPError as err:
        print(f"❌ Failed to create tomato {payload['name']}: {err} - {response.text}")

def main():
    if len(sys.argv) < 2:
        print("Usage: python populate.py <host:port> [count]")
        sys.exit(1)

    base_url = sys.argv[1]
    number_of_tomatoes = int(sys.argv[2]) if len(sys.argv) > 2 else 10

    for _ in range(number_of_tomatoes):
        create_tomato(base_url, generate_tomato())

if __name__ == "__main__":
    main()
