"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test overselling
  locust -f locustfile.py --tags throughput   # Test cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag, events

WIRE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONCURRENCY_CAPACITY = 10

# Shared state
EVENT_IDS = []
CONCURRENCY_EVENT_ID = None


def random_email():
    return f"load_{random.randint(10000, 99999)}@test.com"


def random_name():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def future_date(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).strftime(WIRE_FORMAT)


def register_user(client) -> int:
    resp = client.post("/user", json={
        "name": random_name(),
        "rol": "customer",
        "email": random_email(),
        "password": "test123",
    })
    return resp.json()["id"] if resp.status_code == 200 else None


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"SETUP: concurrency event gets {CONCURRENCY_CAPACITY} tickets")
    print("=" * 60)


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    if CONCURRENCY_EVENT_ID:
        print(f"\nVerify: GET /event/tickets?event_id={CONCURRENCY_EVENT_ID} "
              f"must list at most {CONCURRENCY_CAPACITY} tickets\n")


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 users -> 10 tickets

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM ticket WHERE event_id = X;
    Should be <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.user_id = register_user(self.client)

        if not CONCURRENCY_EVENT_ID:
            resp = self.client.post("/event", json={
                "event_name": "Concurrency Test Event",
                "location": "Test",
                "date": future_date(30),
                "max_tickets": CONCURRENCY_CAPACITY,
                "type": "load-test",
            })
            if resp.status_code == 200:
                globals()["CONCURRENCY_EVENT_ID"] = resp.json()["id"]
                print(f"\nCreated event {CONCURRENCY_EVENT_ID} with {CONCURRENCY_CAPACITY} tickets\n")

    @tag("concurrency")
    @task
    def reserve_limited_tickets(self):
        """All users fight for the same 10 tickets."""
        if not CONCURRENCY_EVENT_ID or not self.user_id:
            return

        with self.client.post(
            f"/ticket?user_id={self.user_id}&event_id={CONCURRENCY_EVENT_ID}",
            name="/ticket [contended]",
            catch_response=True,
        ) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 400 and resp.json().get("error") == "CAPACITY_EXCEEDED":
                resp.success()  # Expected: sold out
            else:
                resp.failure(f"Unexpected: {resp.status_code} {resp.text}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare avg response time, requests/sec and P95/P99 for /event.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(5)
    def list_current_events(self):
        resp = self.client.get("/event/current")
        if resp.status_code == 200:
            for event in resp.json():
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @tag("throughput", "read")
    @task(10)
    def get_event_detail(self):
        """Single event reads hit the cache after the first miss."""
        if EVENT_IDS:
            self.client.get(f"/event?event_id={random.choice(EVENT_IDS)}",
                name="/event?event_id=[id] [cached]")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, every rejection must be a 400.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.user_id = register_user(self.client)

    def _expect_400(self, resp, code=None):
        if resp.status_code != 400:
            resp.failure(f"Expected 400, got {resp.status_code}")
        elif code and resp.json().get("error") != code:
            resp.failure(f"Expected {code}, got {resp.json().get('error')}")
        else:
            resp.success()

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.post(f"/ticket?user_id={self.user_id}&event_id=999999",
                name="/ticket [unknown event]", catch_response=True) as resp:
            self._expect_400(resp, "EVENT_NOT_FOUND")

    @tag("edge")
    @task
    def unknown_user(self):
        with self.client.post("/ticket?user_id=999999&event_id=1",
                name="/ticket [unknown user]", catch_response=True) as resp:
            self._expect_400(resp, "USER_NOT_FOUND")

    @tag("edge")
    @task
    def missing_event_param(self):
        with self.client.post(f"/ticket?user_id={self.user_id}",
                name="/ticket [missing event_id]", catch_response=True) as resp:
            self._expect_400(resp, "MISSING_FIELD")

    @tag("edge")
    @task
    def negative_id(self):
        with self.client.post("/ticket?user_id=-1&event_id=1",
                name="/ticket [negative id]", catch_response=True) as resp:
            self._expect_400(resp, "INVALID_ID")

    @tag("edge")
    @task
    def negative_capacity(self):
        with self.client.post("/event", json={
            "event_name": "Broken",
            "location": "Nowhere",
            "date": future_date(1),
            "max_tickets": -5,
            "type": "load-test",
        }, catch_response=True) as resp:
            self._expect_400(resp)

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/event", data="not json at all",
                headers={"Content-Type": "application/json"},
                catch_response=True) as resp:
            self._expect_400(resp)


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing
      - Some reservations
      - Rare creates
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.user_id = register_user(self.client)

    @task(50)
    def browse_events(self):
        resp = self.client.get("/event/current")
        if resp.status_code == 200:
            for event in resp.json():
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @task(20)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/event?event_id={random.choice(EVENT_IDS)}",
                name="/event?event_id=[id]")

    @task(10)
    def reserve_ticket(self):
        if EVENT_IDS and self.user_id:
            with self.client.post(
                f"/ticket?user_id={self.user_id}&event_id={random.choice(EVENT_IDS)}",
                name="/ticket",
                catch_response=True,
            ) as resp:
                if resp.status_code in (200, 400):
                    resp.success()

    @task(5)
    def my_tickets(self):
        if self.user_id:
            self.client.get(f"/ticket?user_id={self.user_id}", name="/ticket?user_id=[id]")

    @task(3)
    def create_event(self):
        resp = self.client.post("/event", json={
            "event_name": f"Event {random.randint(1, 10000)}",
            "location": "Venue",
            "date": future_date(random.randint(1, 90)),
            "max_tickets": random.randint(10, 500),
            "type": random.choice(["concert", "theatre", "sports"]),
        })
        if resp.status_code == 200:
            EVENT_IDS.append(resp.json()["id"])
