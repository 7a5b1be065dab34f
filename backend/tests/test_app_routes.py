"""Regression tests for application route registration."""
from fastapi.routing import APIRoute

from planwise.main import app


def _routes(path: str, method: str) -> list[APIRoute]:
    return [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and route.path == path and method in route.methods
    ]


def test_plan_routes_registered_once() -> None:
    """Plan endpoints must not be mounted multiple times."""
    assert len(_routes("/plan/generate", "POST")) == 1
    assert len(_routes("/plan/apply", "POST")) == 1


def test_board_routes_registered() -> None:
    assert _routes("/projects", "GET")
    assert _routes("/projects/{project_id}/tasks", "POST")
    assert _routes("/tasks/{task_id}", "PATCH")
    assert _routes("/auth/session", "POST")
