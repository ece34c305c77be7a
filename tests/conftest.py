from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from campsite.editor.draft import SectionBlockEditor
from campsite.editor.sections import Actor
from fakes import MemoryBlockStore, MemorySectionStore


# =============================================================================
# Editor fixtures (no Flask)
# =============================================================================


@pytest.fixture
def block_store() -> MemoryBlockStore:
    return MemoryBlockStore()


@pytest.fixture
def section_store(block_store: MemoryBlockStore) -> MemorySectionStore:
    return MemorySectionStore(block_store)


@pytest.fixture
def history_log() -> list[tuple[str, str]]:
    return []


@pytest.fixture
def make_editor(
    block_store: MemoryBlockStore, history_log: list[tuple[str, str]]
) -> Callable[..., SectionBlockEditor]:
    """Build a loaded editor for section "s1" whose history goes to ``history_log``."""

    def factory(*shapes: dict, title: str = "Welcome", **options) -> SectionBlockEditor:
        block_store.seed("s1", *shapes)
        options.setdefault("allowed_types", ("heading", "text", "image", "link", "file", "gallery"))
        editor = SectionBlockEditor(
            "s1",
            block_store,
            title=title,
            on_history=lambda before, after: history_log.append((before, after)),
            **options,
        )
        editor.load()
        block_store.calls.clear()
        return editor

    return factory


@pytest.fixture
def admin() -> Actor:
    return Actor(id="u-admin", name="Ada Admin", role="admin")


@pytest.fixture
def staff() -> Actor:
    return Actor(id="u-staff", name="Sam Staff", role="staff")


@pytest.fixture
def member() -> Actor:
    return Actor(id="u-member", name="Mia Member", role="member")


# =============================================================================
# Flask fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path: Path) -> Iterator:
    """Application on in-memory SQLite with uploads in a temp folder."""
    from campsite import create_app
    from campsite.extensions import db

    app = create_app("testing", {"UPLOAD_FOLDER": str(tmp_path / "uploads")})

    with app.app_context():
        db.create_all()
        try:
            yield app
        finally:
            db.session.remove()
            db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app) -> dict:
    from campsite.extensions import db
    from campsite.models.user import User

    made = {}
    for key, role in (
        ("admin", "admin"),
        ("staff", "staff"),
        ("helper", "staff"),
        ("member", "member"),
    ):
        user = User()
        user.email = f"{key}@camp.test"
        user.name = key.title()
        user.role = role
        user.set_password("secret")
        db.session.add(user)
        made[key] = user
    db.session.commit()
    return made


@pytest.fixture
def headers_for(app) -> Callable[..., dict]:
    """Authorization headers for a User row."""
    from flask_jwt_extended import create_access_token

    def build(user, **extra) -> dict:
        token = create_access_token(
            identity=user.id,
            additional_claims={"role": user.role, "name": user.name},
        )
        return {"Authorization": f"Bearer {token}", **extra}

    return build
