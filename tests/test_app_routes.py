"""Regression tests for application route registration."""
from fastapi.routing import APIRoute

from dayplanner.main import app


def test_schedule_routes_registered_once() -> None:
    registered = [
        (route.path, method)
        for route in app.routes
        if isinstance(route, APIRoute)
        for method in route.methods
    ]

    for expected in [
        ("/schedule", "GET"),
        ("/schedule/{day}", "GET"),
        ("/schedule/{day}/blocks/custom", "POST"),
        ("/schedule/{day}/blocks/{index}/apply-all", "POST"),
        ("/schedule/{day}/reset", "POST"),
        ("/schedule/{day}/blocks/{index}/tasks/{task_id}", "DELETE"),
    ]:
        assert registered.count(expected) == 1, expected
