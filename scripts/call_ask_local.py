# scripts/call_ask_local.py
import sys, pathlib, os, json
from dotenv import load_dotenv, find_dotenv

# Ensure project root is on sys.path (run from anywhere)
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

load_dotenv(find_dotenv())

print("SCRIPT sees OpenAI key:", bool(os.environ.get("OPENAI_API_KEY")))
print("SCRIPT sees CORE key:", bool(os.environ.get("CORE_API_KEY")))

from fastapi.testclient import TestClient
from genelinker.server.app import create_app

client = TestClient(create_app())

question = " ".join(sys.argv[1:]) or "How does TP53 respond to DNA damage?"

r = client.post("/ask", json={"q": question})
print("ask status:", r.status_code)
print(json.dumps(r.json(), indent=2)[:1200])

r = client.post("/papers/search", json={"q": question, "limit": 3})
print("search status:", r.status_code)
for p in r.json().get("value", {}).get("papers", []):
    print(" -", p["id"], p["title"][:80])
