"""Tests for cache, storage, accounts and task counters."""

import pytest

from ambassador.models import Task, UserProfile
from ambassador.services.admin_auth import verify_admin_credentials
from ambassador.services.cache import TTLCache
from ambassador.services.counters import recount_task_counters
from ambassador.services.errors import AuthenticationError, NotFoundError, ValidationError
from ambassador.services.passwords import hash_password, verify_password
from ambassador.services.points import award_points
from ambassador.services.storage import (
    delete_file,
    resolve_upload,
    safe_filename,
    submission_owner,
    submission_path,
    upload_file,
)
from ambassador.services.tasks import create_task, update_task
from ambassador.services.users import (
    authenticate_password_user,
    complete_profile,
    create_password_user,
    normalize_phone,
    upsert_google_user,
)

from .factories import make_submission, make_task, make_user


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestTTLCache:
    def test_returns_value_until_expiry(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set("leaderboard_top", [1, 2], ttl=120)

        clock.now += 119
        assert cache.get("leaderboard_top") == [1, 2]

        clock.now += 2
        assert cache.get("leaderboard_top") is None

    def test_missing_key(self):
        assert TTLCache().get("nope") is None

    def test_invalidate_and_prefix(self):
        cache = TTLCache()
        cache.set("tasks_all", "a")
        cache.set("tasks_open", "b")
        cache.set("leaderboard_top", "c")

        cache.invalidate_prefix("tasks_")
        assert cache.get("tasks_all") is None
        assert cache.get("tasks_open") is None
        assert cache.get("leaderboard_top") == "c"

        cache.invalidate("leaderboard_top")
        assert cache.get("leaderboard_top") is None

    def test_clear(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.clear()
        assert cache.get("a") is None


class TestStorage:
    def test_safe_filename_strips_directories(self):
        assert safe_filename("../../etc/passwd") == "passwd"
        assert safe_filename("C:\\Users\\me\\poster final.png") == "poster_final.png"
        assert safe_filename("") == "upload"

    def test_submission_path_layout(self):
        path = submission_path("abc", 7, "proof.pdf")
        prefix, unique, name = path.rsplit("/", 2)
        assert prefix == "submissions/abc/7"
        assert len(unique) == 32
        assert name == "proof.pdf"

    def test_same_name_uploads_get_distinct_paths(self, tmp_path):
        first = submission_path("abc", 7, "proof.png")
        second = submission_path("abc", 7, "proof.png")
        assert first != second

        upload_file(b"FIRST", first, root=tmp_path)
        upload_file(b"SECOND", second, root=tmp_path)
        assert resolve_upload(first, root=tmp_path).read_bytes() == b"FIRST"
        assert resolve_upload(second, root=tmp_path).read_bytes() == b"SECOND"

    def test_submission_owner(self, tmp_path):
        assert submission_owner(submission_path("abc", 7, "a.png"), root=tmp_path) == "abc"
        assert submission_owner("submissions/abc/../xyz/7/a.png", root=tmp_path) == "xyz"
        assert submission_owner("other/file.txt", root=tmp_path) is None

    def test_delete_file(self, tmp_path):
        upload_file(b"x", "submissions/u/1/a.txt", root=tmp_path)
        delete_file("submissions/u/1/a.txt", root=tmp_path)
        assert not (tmp_path / "submissions/u/1/a.txt").exists()
        delete_file("submissions/u/1/a.txt", root=tmp_path)

    def test_upload_and_resolve(self, tmp_path):
        url = upload_file(b"hello", "submissions/u/1/a.txt", root=tmp_path)
        assert url == "/uploads/submissions/u/1/a.txt"
        assert resolve_upload("submissions/u/1/a.txt", root=tmp_path).read_bytes() == b"hello"

    def test_rejects_paths_outside_root(self, tmp_path):
        with pytest.raises(ValidationError):
            upload_file(b"x", "../escape.txt", root=tmp_path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            resolve_upload("nothing/here.txt", root=tmp_path)


class TestPasswords:
    def test_round_trip(self):
        hashed = hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)

    def test_malformed_hash(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")
        assert not verify_password("anything", None)

    def test_non_string_password(self):
        hashed = hash_password("12345678")
        assert not verify_password(12345678, hashed)
        with pytest.raises(ValidationError):
            hash_password(12345678)


class TestAdminCredentials:
    CREDENTIALS = {
        "lead": {
            "username": "lead",
            "password_hash": hash_password("pa55word"),
            "name": "Campus Lead",
        }
    }

    def test_valid_credentials(self):
        admin = verify_admin_credentials("lead", "pa55word", self.CREDENTIALS)
        assert admin == {"username": "lead", "name": "Campus Lead"}

    @pytest.mark.parametrize("username,password", [("lead", "nope"), ("ghost", "pa55word")])
    def test_invalid_credentials(self, username, password):
        with pytest.raises(AuthenticationError):
            verify_admin_credentials(username, password, self.CREDENTIALS)

    @pytest.mark.parametrize("username,password", [("lead", 12345), (["lead"], "pa55word")])
    def test_non_string_credentials(self, username, password):
        with pytest.raises(AuthenticationError):
            verify_admin_credentials(username, password, self.CREDENTIALS)


class TestAccounts:
    def test_create_and_authenticate(self, session):
        user = create_password_user(
            session, email=" New@Example.EDU ", password="hunter22", display_name="Neo"
        )
        assert user.email == "new@example.edu"
        assert user.points == 0
        assert user.rank is None

        found = authenticate_password_user(session, email="new@example.edu", password="hunter22")
        assert found.id == user.id

        with pytest.raises(AuthenticationError):
            authenticate_password_user(session, email="new@example.edu", password="bad")

    def test_duplicate_email(self, session):
        create_password_user(session, email="dup@example.edu", password="hunter22", display_name=None)
        with pytest.raises(ValidationError):
            create_password_user(session, email="DUP@example.edu", password="hunter22", display_name=None)

    @pytest.mark.parametrize(
        "email,password", [("not-an-email", "hunter22"), ("ok@example.edu", "short")]
    )
    def test_rejects_bad_input(self, session, email, password):
        with pytest.raises(ValidationError):
            create_password_user(session, email=email, password=password, display_name=None)

    @pytest.mark.parametrize(
        "email,password,display_name",
        [
            ("ok@example.edu", 12345678, None),
            (42, "hunter22", None),
            ("ok@example.edu", "hunter22", ["Neo"]),
        ],
    )
    def test_rejects_non_string_fields(self, session, email, password, display_name):
        with pytest.raises(ValidationError):
            create_password_user(
                session, email=email, password=password, display_name=display_name
            )

    def test_login_with_non_string_fields(self, session):
        create_password_user(session, email="n@example.edu", password="hunter22", display_name=None)
        with pytest.raises(AuthenticationError):
            authenticate_password_user(session, email="n@example.edu", password=12345678)
        with pytest.raises(AuthenticationError):
            authenticate_password_user(session, email={"a": 1}, password="hunter22")

    def test_google_upsert_reuses_profile(self, session):
        first = upsert_google_user(session, email="g@example.edu", sub="123", name="Gee")
        again = upsert_google_user(session, email="G@example.edu", sub="123", name="Other")
        assert first.id == again.id
        assert again.display_name == "Gee"
        assert again.provider == "google"

    def test_phone_validation(self):
        assert normalize_phone("9876543210") == "+919876543210"
        for bad in ("12345", "98765432100", "98765abcde", "", None):
            with pytest.raises(ValidationError):
                normalize_phone(bad)

    def test_complete_profile(self, session):
        user = make_user(session)
        year = user.created_at.year + 2
        updated = complete_profile(
            session, user, phone_number="9876543210", college="IIT", graduation_year=str(year)
        )
        assert updated.profile_completed is True
        assert updated.phone_number == "+919876543210"
        assert updated.graduation_year == year

    def test_complete_profile_rejects_bad_phone_before_write(self, session):
        user = make_user(session)
        with pytest.raises(ValidationError):
            complete_profile(session, user, phone_number="123", college="IIT", graduation_year=2027)
        session.expire_all()
        assert session.get(UserProfile, user.id).profile_completed is False


class TestTaskCounters:
    def test_recount_matches_submissions(self, session):
        user = make_user(session)
        busy = make_task(session)
        idle = make_task(session)
        reviewed = make_submission(session, busy, user)
        make_submission(session, busy, user)
        award_points(session, reviewed.id, user.id, 1, reviewer="admin")

        for task in (busy, idle):
            task.pending_count = 42
            task.total_submissions = 42
            session.add(task)
        session.commit()

        summary = recount_task_counters(session)

        assert summary.tasks == 2
        assert summary.submissions == 2
        session.expire_all()
        busy = session.get(Task, busy.id)
        idle = session.get(Task, idle.id)
        assert (busy.pending_count, busy.total_submissions) == (1, 2)
        assert (idle.pending_count, idle.total_submissions) == (0, 0)


class TestTaskFields:
    @pytest.mark.parametrize(
        "body", [{"title": 5}, {"title": "Poster", "description": {"text": "x"}}]
    )
    def test_create_rejects_non_string_fields(self, session, body):
        with pytest.raises(ValidationError):
            create_task(session, body, created_by="admin")

    def test_update_rejects_non_string_title(self, session):
        task = make_task(session, title="Poster")
        with pytest.raises(ValidationError):
            update_task(session, task, {"title": ["Poster"]})
