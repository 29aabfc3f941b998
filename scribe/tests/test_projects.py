"""
Tests for the project store and title derivation.
"""

from scribe.models import AppMode, Message, Role
from scribe.projects import DEFAULT_TITLE, derive_title


def msg(role, text, ts=0):
    return Message(role=role, text=text, timestamp=ts)


class TestProjectStore:
    """Create, save, list, delete."""

    def test_create_then_save_two_messages(self, studio, clock):
        project = studio.projects.create("u1", AppMode.BOOK)
        created_at = project.updated_at

        clock.advance(minutes=5)
        project.messages = [msg(Role.USER, "Once upon a time"), msg(Role.MODEL, "there was a fox")]
        studio.projects.save(project)

        listed = studio.projects.list_for_user("u1")
        assert len(listed) == 1
        assert len(listed[0].messages) == 2
        assert listed[0].updated_at == created_at + 5 * 60 * 1000

    def test_create_uses_default_title(self, studio):
        project = studio.projects.create("u1", AppMode.CHAT)
        assert project.name == DEFAULT_TITLE
        assert project.messages == []

    def test_ids_are_unique(self, studio):
        ids = {studio.projects.create("u1", AppMode.CHAT).id for _ in range(20)}
        assert len(ids) == 20

    def test_list_filters_by_user_and_sorts_newest_first(self, studio, clock):
        older = studio.projects.create("u1", AppMode.BOOK, "older")
        clock.advance(seconds=1)
        studio.projects.create("u2", AppMode.BOOK, "someone else")
        clock.advance(seconds=1)
        newer = studio.projects.create("u1", AppMode.SCRIPT, "newer")

        listed = studio.projects.list_for_user("u1")
        assert [p.id for p in listed] == [newer.id, older.id]

    def test_save_upserts_by_id(self, studio):
        project = studio.projects.create("u1", AppMode.BOOK)
        project.name = "Renamed"
        studio.projects.save(project)
        listed = studio.projects.list_for_user("u1")
        assert len(listed) == 1
        assert listed[0].name == "Renamed"

    def test_delete(self, studio):
        keep = studio.projects.create("u1", AppMode.BOOK)
        drop = studio.projects.create("u1", AppMode.BOOK)
        assert studio.projects.delete(drop.id) is True
        assert [p.id for p in studio.projects.list_for_user("u1")] == [keep.id]
        assert studio.projects.get(drop.id) is None

    def test_delete_unknown_id(self, studio):
        assert studio.projects.delete("proj_missing") is False


class TestDeriveTitle:
    """Title from the first user message."""

    def test_truncates_first_user_message(self):
        text = "A detective wakes up in a lighthouse with no memory"
        title = derive_title([msg(Role.MODEL, "Welcome"), msg(Role.USER, text)])
        assert title == text[:30] + "..."

    def test_no_user_message(self):
        assert derive_title([]) == DEFAULT_TITLE
