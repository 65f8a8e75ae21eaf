"""
Locust load testing for the delay-task queue API.

Run with:
    locust -f tests/load/locustfile.py --host=http://localhost:8000

Or headless:
    locust -f tests/load/locustfile.py --host=http://localhost:8000 \
        --headless -u 100 -r 10 --run-time 5m
"""

import random
import uuid

from locust import HttpUser, between, task

# Task names shared by every simulated user, so pullers contend on cursors
TEST_TASKNAMES = [f"load-test-{i}" for i in range(5)]


class ProducerUser(HttpUser):
    """
    Simulated producer scheduling tasks a few seconds ahead.
    """

    weight = 3
    wait_time = between(0.1, 0.5)

    @task(10)
    def schedule_task(self):
        """Schedule a task with a random delay."""
        taskname = random.choice(TEST_TASKNAMES)
        self.client.post(
            f"/v1/tasks/{taskname}",
            json={
                "payload": f"load-test-{uuid.uuid4().hex}",
                "delay_ms": random.randint(0, 5000),
            },
            name="/v1/tasks/{taskname} [POST]",
        )

    @task(1)
    def health_check(self):
        """Check API health."""
        self.client.get("/health")


class SweeperUser(HttpUser):
    """
    Simulated sweeper pulling due tasks.

    Several of these share each task name and split its buckets.
    """

    weight = 1
    wait_time = between(0.05, 0.2)

    @task(10)
    def pull_tasks(self):
        """Pull a batch of due tasks."""
        taskname = random.choice(TEST_TASKNAMES)
        with self.client.post(
            f"/v1/tasks/{taskname}/pull",
            name="/v1/tasks/{taskname}/pull [POST]",
            catch_response=True,
        ) as response:
            if response.status_code != 200:
                response.failure(f"Pull failed: {response.status_code}")
            elif response.json()["cursor"] > response.json()["matured"]:
                response.failure("Cursor ran ahead of the matured tick")

    @task(1)
    def get_cursor(self):
        """Read a cursor; 404 just means nobody has pulled that name yet."""
        taskname = random.choice(TEST_TASKNAMES)
        with self.client.get(
            f"/v1/tasks/{taskname}/cursor",
            name="/v1/tasks/{taskname}/cursor [GET]",
            catch_response=True,
        ) as response:
            if response.status_code == 404:
                response.success()
