"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --host http://localhost:4000 --tags write  # Concurrent mutations
  locust -f locustfile.py --host http://localhost:4000 --tags read   # Queries with relationships
  locust -f locustfile.py --host http://localhost:4000 --tags edge   # Bad input
  locust -f locustfile.py --host http://localhost:4000               # All tests

GraphQL always answers 200; a response counts as a failure when it carries
errors the scenario didn't expect.
"""

import random
import string
from locust import HttpUser, task, between, tag, events

# Shared state
USER_IDS = []
EVENT_IDS = []


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def graphql(client, query, name, variables=None, expect_error=None):
    """POST a GraphQL operation and mark the locust response."""
    with client.post(
        "/graphql",
        json={"query": query, "variables": variables or {}},
        name=name,
        catch_response=True,
    ) as resp:
        if resp.status_code != 200:
            resp.failure(f"HTTP {resp.status_code}")
            return None
        body = resp.json()
        errors = body.get("errors") or []
        if expect_error:
            if errors and expect_error in errors[0]["message"]:
                resp.success()
            else:
                resp.failure(f"Expected error containing {expect_error!r}")
            return body
        if errors:
            resp.failure(errors[0]["message"])
            return None
        resp.success()
        return body["data"]


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "="*60)
    print("Event Graph API load test")
    print("="*60)


class WriteUser(HttpUser):
    """
    TEST 1: Concurrent mutations against one data file.

    Run: locust -f locustfile.py --tags write -u 50 -r 25 --run-time 30s

    Afterwards every user/event id in the data file should be unique.
    """
    wait_time = between(0, 0.1)

    @tag("write")
    @task(3)
    def add_user(self):
        name = random_username()
        data = graphql(self.client, """
            mutation($data: createUserInput!) { addUser(data: $data) { id } }
        """, "addUser", {"data": {"username": name, "email": f"{name}@load.test"}})
        if data:
            USER_IDS.append(data["addUser"]["id"])

    @tag("write")
    @task(2)
    def add_event(self):
        if not USER_IDS:
            return
        data = graphql(self.client, """
            mutation($data: createEventInput!) { addEvent(data: $data) { id } }
        """, "addEvent", {"data": {
            "title": "Load test event",
            "desc": "Created by locust",
            "date": "2030-01-01",
            "user_id": random.choice(USER_IDS),
        }})
        if data:
            EVENT_IDS.append(data["addEvent"]["id"])

    @tag("write")
    @task(2)
    def join_event(self):
        if not USER_IDS or not EVENT_IDS:
            return
        graphql(self.client, """
            mutation($data: createParticipantInput!) { addParticipant(data: $data) { id } }
        """, "addParticipant", {"data": {
            "user_id": random.choice(USER_IDS),
            "event_id": random.choice(EVENT_IDS),
        }})

    @tag("write")
    @task(1)
    def rename_user(self):
        if not USER_IDS:
            return
        graphql(self.client, """
            mutation($id: ID!, $data: updateUserInput!) { updateUser(id: $id, data: $data) { id } }
        """, "updateUser", {"id": random.choice(USER_IDS), "data": {"username": random_username()}})


class ReadUser(HttpUser):
    """
    TEST 2: Read throughput, including relationship resolution.

    Run: locust -f locustfile.py --tags read -u 100 -r 20 --run-time 60s

    Every relationship field rescans a collection, so nested queries get
    slower as the data file grows.
    """
    wait_time = between(0.1, 0.5)

    @tag("read")
    @task(10)
    def list_events(self):
        graphql(self.client, "{ events { id title } }", "events")

    @tag("read")
    @task(3)
    def events_with_relations(self):
        graphql(self.client, """
            { events { id user { username } location { name } participants { user { username } } } }
        """, "events+relations")

    @tag("read")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash and should answer with GraphQL errors.
    """
    wait_time = between(0.5, 1.5)

    @tag("edge")
    @task
    def update_unknown_user(self):
        graphql(self.client, """
            mutation { updateUser(id: "does-not-exist", data: {username: "x"}) { id } }
        """, "updateUser [missing]", expect_error="not found")

    @tag("edge")
    @task
    def missing_field(self):
        graphql(self.client, """
            mutation { addUser(data: {username: "edge"}) { id } }
        """, "addUser [invalid]", expect_error="was not provided")

    @tag("edge")
    @task
    def delete_unknown_location(self):
        graphql(self.client, """
            mutation { deleteLocation(id: "nope") { id } }
        """, "deleteLocation [missing]", expect_error="not found")
