from planwise.db.base import Base
from planwise.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_core_tables() -> None:
    table_names = set(Base.metadata.tables.keys())
    expected = {
        "users",
        "projects",
        "tasks",
        "curriculums",
    }

    assert expected.issubset(table_names)


def test_task_status_is_constrained() -> None:
    constraints = {constraint.name for constraint in Base.metadata.tables["tasks"].constraints}

    assert "ck_tasks_status" in constraints
