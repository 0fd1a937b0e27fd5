#!/usr/bin/env python3
"""
Quick verification that a running InsightHub server works end-to-end.

    python insighthub_server.py --data /tmp/insighthub_verify.json &
    python verify_insighthub.py --url http://127.0.0.1:3000
"""
import argparse
import sys
import uuid

import requests


def call(base: str, method: str, path: str, body=None):
    r = requests.request(method, f"{base}/api{path}", json=body, timeout=5)
    return r.status_code, r.json()


def main():
    parser = argparse.ArgumentParser(description="InsightHub smoke check")
    parser.add_argument("--url", default="http://127.0.0.1:3000")
    args = parser.parse_args()
    base = args.url.rstrip("/")

    print("=" * 60)
    print("InsightHub Verification")
    print("=" * 60)

    try:
        print("\n[1/6] Health check...")
        status, body = call(base, "GET", "/health")
        if status != 200 or body.get("status") != "OK":
            print(f"❌ Unexpected health response: {status} {body}")
            return 1
        print(f"✅ {body['message']}")

        print("\n[2/6] Adding a task...")
        _, body = call(base, "POST", "/tasks", {"text": "Verify the dashboard"})
        task = body["task"]
        print(f"✅ Task {task['id']} created")

        print("\n[3/6] Completing and deleting the task...")
        _, body = call(base, "PUT", f"/tasks/{task['id']}", {"done": True})
        assert body["task"]["done"] is True
        status, _ = call(base, "DELETE", f"/tasks/{task['id']}")
        assert status == 200
        status, _ = call(base, "DELETE", f"/tasks/{task['id']}")
        assert status == 404
        print("✅ Done flag set, task removed, second delete rejected")

        print("\n[4/6] Recording a stat...")
        _, before = call(base, "GET", "/stats")
        _, after = call(base, "POST", "/stats", {"type": "summary"})
        assert after["stats"]["summaries"] == before["stats"]["summaries"] + 1
        print(f"✅ Stats: {after['stats']}")

        print("\n[5/6] Text tools...")
        _, body = call(base, "POST", "/ai/tasks", {
            "text": "Please call the vendor. The weather is nice. Schedule a meeting with the team.",
        })
        print(f"   tasks:     {body['tasks']}")
        _, body = call(base, "POST", "/ai/sentiment", {"text": "What a great day"})
        print(f"   sentiment: {body['label']} ({body['score']})")
        _, body = call(base, "POST", "/ai/ideas", {"topic": "gardening"})
        print(f"   ideas:     {len(body['ideas'])}")
        print("✅ Text tools responded")

        print("\n[6/6] Register and login...")
        email = f"verify-{uuid.uuid4().hex[:8]}@example.com"
        _, body = call(base, "POST", "/auth/register", {"email": email, "password": "pw"})
        assert body["success"]
        status, _ = call(base, "POST", "/auth/login", {"email": email, "password": "wrong"})
        assert status == 401
        _, body = call(base, "POST", "/auth/login", {"email": email, "password": "pw"})
        assert body["user"]["email"] == email
        print(f"✅ User {body['user']['id']} can log in")
    except requests.RequestException as e:
        print(f"❌ Error connecting to server: {e}")
        return 1
    except (AssertionError, KeyError) as e:
        print(f"❌ Unexpected response: {e!r}")
        return 1

    print("\n" + "=" * 60)
    print("✅ All checks passed")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
