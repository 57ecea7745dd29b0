"""
Tests for the append-only version and comment logs, and editor ratings
"""
from types import SimpleNamespace

import pytest

from core.config import settings
from core.errors import Conflict, InvalidState, Unauthorized, ValidationError
from core.lifecycle import ProjectStatus
from crud import comment_crud, project_crud, rating_crud, version_crud
from models.comment import Comment
from schemas.rating_schema import RatingCreate

VIDEO = "https://cdn.example.com/edits/{}.mp4"


class TestAppendVersion:
    def test_numbers_start_at_one_and_increase(self, db_session, editor, claimed):
        numbers = [
            version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(i)).version_number
            for i in range(3)
        ]
        assert numbers == [1, 2, 3]
        listed = version_crud.list_versions(db_session, claimed.id, editor.actor)
        assert [v.version_number for v in listed] == [1, 2, 3]

    def test_first_version_moves_to_revision(self, db_session, editor, claimed):
        version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(1), "First cut")
        assert project_crud.get_project(db_session, claimed.id).status == ProjectStatus.IN_REVISION

    def test_first_version_keeps_in_progress_when_configured(self, db_session, editor, claimed, monkeypatch):
        monkeypatch.setattr(settings, "FIRST_VERSION_ENTERS_REVISION", False)
        version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(1))
        assert project_crud.get_project(db_session, claimed.id).status == ProjectStatus.IN_PROGRESS
        version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(2))
        assert project_crud.get_project(db_session, claimed.id).status == ProjectStatus.IN_REVISION

    def test_only_assigned_editor(self, db_session, creator, other_editor, claimed):
        with pytest.raises(Unauthorized):
            version_crud.append_version(db_session, claimed.id, other_editor.actor, VIDEO.format(1))
        with pytest.raises(Unauthorized):
            version_crud.append_version(db_session, claimed.id, creator.actor, VIDEO.format(1))

    def test_not_before_claim(self, db_session, editor, submitted):
        with pytest.raises(Unauthorized):
            version_crud.append_version(db_session, submitted.id, editor.actor, VIDEO.format(1))

    def test_completed_project_takes_no_versions(self, db_session, creator, editor, claimed):
        version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(1))
        project_crud.approve_project(db_session, claimed.id, creator.actor)
        with pytest.raises(InvalidState):
            version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(2))
        assert len(version_crud.list_versions(db_session, claimed.id, creator.actor)) == 1

    def test_collision_retries_with_fresh_number(self, db_session, editor, claimed, monkeypatch):
        """A stale max+1 hits the unique constraint and is recomputed"""
        version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(1))

        real_next = version_crud._next_version_number
        calls = []

        def stale_first(db, project_id):
            calls.append(project_id)
            return 1 if len(calls) == 1 else real_next(db, project_id)

        monkeypatch.setattr(version_crud, "_next_version_number", stale_first)
        version = version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(2))

        assert version.version_number == 2
        assert len(calls) == 2
        listed = version_crud.list_versions(db_session, claimed.id, editor.actor)
        assert [v.version_number for v in listed] == [1, 2]

    def test_gives_up_after_retries(self, db_session, editor, claimed, monkeypatch):
        version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(1))
        monkeypatch.setattr(version_crud, "_next_version_number", lambda db, project_id: 1)
        with pytest.raises(Conflict):
            version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(2))
        assert [v.version_number for v in version_crud.list_versions(db_session, claimed.id, editor.actor)] == [1]

    def test_outsiders_cannot_list(self, db_session, other_editor, claimed):
        with pytest.raises(Unauthorized):
            version_crud.list_versions(db_session, claimed.id, other_editor.actor)


class TestComments:
    def test_thread_is_ordered_oldest_first(self, db_session, creator, editor, claimed):
        comment_crud.append_comment(db_session, claimed.id, creator.actor, "Please tighten the intro")
        comment_crud.append_comment(db_session, claimed.id, editor.actor, "Will do", timestamp=3.5)
        thread = comment_crud.list_comments(db_session, claimed.id, creator.actor)
        assert [c.content for c in thread] == ["Please tighten the intro", "Will do"]
        assert thread[1].timestamp == 3.5
        assert thread[1].user_id == editor.id

    def test_content_is_trimmed_and_required(self, db_session, creator, draft):
        comment = comment_crud.append_comment(db_session, draft.id, creator.actor, "  note to self  ")
        assert comment.content == "note to self"
        with pytest.raises(ValidationError):
            comment_crud.append_comment(db_session, draft.id, creator.actor, "   ")

    def test_negative_timestamp(self, db_session, creator, draft):
        with pytest.raises(ValidationError):
            comment_crud.append_comment(db_session, draft.id, creator.actor, "hmm", timestamp=-1)

    def test_unassigned_editor_cannot_comment(self, db_session, other_editor, claimed):
        with pytest.raises(Unauthorized):
            comment_crud.append_comment(db_session, claimed.id, other_editor.actor, "Hello")

    def test_comment_racing_cancel_is_rejected(self, db_session, creator, editor, claimed, monkeypatch):
        """Read while open, cancelled before the insert commits"""
        stale = SimpleNamespace(
            id=claimed.id,
            creator_id=claimed.creator_id,
            editor_id=editor.id,
            status=ProjectStatus.IN_PROGRESS,
        )
        project_crud.cancel_project(db_session, claimed.id, creator.actor)
        real_get = project_crud.get_project
        reads = []

        def stale_then_fresh(db, project_id):
            reads.append(project_id)
            return stale if len(reads) == 1 else real_get(db, project_id)

        monkeypatch.setattr(project_crud, "get_project", stale_then_fresh)
        with pytest.raises(InvalidState):
            comment_crud.append_comment(db_session, claimed.id, editor.actor, "Here is the next cut")

        monkeypatch.setattr(project_crud, "get_project", real_get)
        assert db_session.query(Comment).filter_by(project_id=claimed.id).count() == 0

    def test_owner_comment_survives_concurrent_claim(self, db_session, creator, editor, submitted, monkeypatch):
        stale = SimpleNamespace(
            id=submitted.id,
            creator_id=submitted.creator_id,
            editor_id=None,
            status=ProjectStatus.SUBMITTED,
        )
        project_crud.claim_project(db_session, submitted.id, editor.actor)
        monkeypatch.setattr(project_crud, "get_project", lambda db, project_id: stale)

        comment = comment_crud.append_comment(db_session, submitted.id, creator.actor, "Music is in the drive folder")
        assert comment.content == "Music is in the drive folder"

    def test_cancelled_project_rejects_comments(self, db_session, creator, claimed):
        project_crud.cancel_project(db_session, claimed.id, creator.actor)
        with pytest.raises(InvalidState):
            comment_crud.append_comment(db_session, claimed.id, creator.actor, "Why?")


class TestRating:
    @pytest.fixture()
    def completed(self, db_session, creator, editor, claimed):
        version_crud.append_version(db_session, claimed.id, editor.actor, VIDEO.format(1))
        return project_crud.approve_project(db_session, claimed.id, creator.actor)

    def test_rate_completed_project(self, db_session, creator, editor, completed):
        rating = rating_crud.rate_editor(db_session, completed.id, creator.actor, RatingCreate(rating=5, review="Great"))
        assert rating.editor_id == editor.id
        assert rating_crud.editor_average(db_session, editor.id) == 5.0

    def test_only_once(self, db_session, creator, completed):
        rating_crud.rate_editor(db_session, completed.id, creator.actor, RatingCreate(rating=4))
        with pytest.raises(Conflict):
            rating_crud.rate_editor(db_session, completed.id, creator.actor, RatingCreate(rating=1))

    def test_not_before_completion(self, db_session, creator, claimed):
        with pytest.raises(InvalidState):
            rating_crud.rate_editor(db_session, claimed.id, creator.actor, RatingCreate(rating=3))

    def test_editor_cannot_rate_self(self, db_session, editor, completed):
        with pytest.raises(Unauthorized):
            rating_crud.rate_editor(db_session, completed.id, editor.actor, RatingCreate(rating=5))
