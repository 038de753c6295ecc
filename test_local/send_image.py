import sys
import time
from datetime import datetime

import requests

LOCAL_IP = "127.0.0.1"
API_URL = f"http://{LOCAL_IP}:8000"
INTERVAL = 1

# Usage:
#   python send_image.py photo.jpg              -> authorize every INTERVAL seconds
#   python send_image.py photo.jpg --register Alice

if len(sys.argv) < 2:
    print("Usage: send_image.py <image.jpg> [--register NAME]")
    sys.exit(1)

image_path = sys.argv[1]
with open(image_path, "rb") as f:
    img_bytes = f.read()

files = {
    "image": ("image.jpg", img_bytes, "image/jpeg")
}

if len(sys.argv) >= 4 and sys.argv[2] == "--register":
    response = requests.post(f"{API_URL}/register", files=files, data={"name": sys.argv[3]}, timeout=30)
    print(f"[{datetime.now()}] Server response:", response.status_code, response.json())
    sys.exit(0)

print("Sending frames to server ...")

while True:
    try:
        response = requests.post(f"{API_URL}/upload", files=files, timeout=30)
        print(f"[{datetime.now()}] Server response:", response.status_code, response.json())
    except requests.RequestException as e:
        print("Request failed:", e)

    time.sleep(INTERVAL)
