import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from credential_store.domain.errors import (
    AccountInactive,
    AuthenticationError,
    DuplicateEmail,
    DuplicateHandle,
    InvalidCredentials,
    InvalidEmail,
    InvalidHandle,
    InvalidLanguage,
    InvalidSecret,
    UserNotFound,
)


def test_create_then_verify_returns_same_user_id(credential_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    assert credential_service.verify_credentials("alice", "s3cret") == user_id


def test_wrong_secret_and_unknown_handle_fail_identically(credential_service):
    credential_service.create_user("a@b.com", "s3cret", "alice")

    with pytest.raises(InvalidCredentials) as wrong_secret:
        credential_service.verify_credentials("alice", "wrong")
    with pytest.raises(InvalidCredentials) as unknown_handle:
        credential_service.verify_credentials("nobody", "s3cret")

    assert type(wrong_secret.value) is type(unknown_handle.value)
    assert str(wrong_secret.value) == str(unknown_handle.value)


def test_empty_candidate_is_invalid_credentials(credential_service):
    credential_service.create_user("a@b.com", "s3cret", "alice")

    with pytest.raises(InvalidCredentials):
        credential_service.verify_credentials("alice", "")
    with pytest.raises(InvalidCredentials):
        credential_service.verify_credentials("", "s3cret")


def test_update_secret_rotates(credential_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    credential_service.update_secret(user_id, "n3w-s3cret")

    with pytest.raises(InvalidCredentials):
        credential_service.verify_credentials("alice", "s3cret")
    assert credential_service.verify_credentials("alice", "n3w-s3cret") == user_id


def test_update_secret_unknown_user(credential_service):
    with pytest.raises(UserNotFound):
        credential_service.update_secret("missing", "s3cret")


def test_update_secret_rejects_empty(credential_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    with pytest.raises(InvalidSecret):
        credential_service.update_secret(user_id, "")
    assert credential_service.verify_credentials("alice", "s3cret") == user_id


def test_general_update_without_secret_keeps_login_working(credential_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    user = credential_service.update_user(user_id, first_name="Alice", last_name="Liddell", language="de")

    assert (user.first_name, user.last_name, user.language) == ("Alice", "Liddell", "de")
    assert credential_service.verify_credentials("alice", "s3cret") == user_id


def test_general_update_with_secret_rehashes(credential_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    credential_service.update_user(user_id, secret="other", first_name="Alice")

    assert credential_service.verify_credentials("alice", "other") == user_id
    with pytest.raises(InvalidCredentials):
        credential_service.verify_credentials("alice", "s3cret")


def test_deactivate_blocks_verification_and_is_idempotent(credential_service, audit_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    credential_service.deactivate(user_id)
    credential_service.deactivate(user_id)

    with pytest.raises(AccountInactive) as excinfo:
        credential_service.verify_credentials("alice", "s3cret")
    assert isinstance(excinfo.value, AuthenticationError)
    assert credential_service.get_user(user_id).active is False

    events = [entry.event for entry in audit_service.list_events(user_id)]
    assert events.count("account deactivated") == 1


def test_inactive_account_with_wrong_secret_is_invalid_credentials(credential_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")
    credential_service.deactivate(user_id)

    with pytest.raises(InvalidCredentials):
        credential_service.verify_credentials("alice", "wrong")


def test_deactivate_unknown_user(credential_service):
    with pytest.raises(UserNotFound):
        credential_service.deactivate("missing")


def test_reactivation_through_update(credential_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")
    credential_service.deactivate(user_id)

    credential_service.update_user(user_id, active=True)

    assert credential_service.verify_credentials("alice", "s3cret") == user_id


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"email": "not-an-email"}, InvalidEmail),
        ({"email": "a@b"}, InvalidEmail),
        ({"secret": ""}, InvalidSecret),
        ({"handle": ""}, InvalidHandle),
        ({"handle": "h" * 33}, InvalidHandle),
        ({"language": "eng"}, InvalidLanguage),
        ({"language": "e"}, InvalidLanguage),
    ],
)
def test_create_user_validation(credential_service, kwargs, error):
    params = {"email": "a@b.com", "secret": "s3cret", "handle": "alice"}
    params.update(kwargs)

    with pytest.raises(error):
        credential_service.create_user(**params)
    with pytest.raises(UserNotFound):
        credential_service.find_by_email("a@b.com")


def test_create_user_accepts_32_character_handle(credential_service):
    handle = "h" * 32
    user_id = credential_service.create_user("a@b.com", "s3cret", handle)

    assert credential_service.find_by_handle(handle).user_id == user_id


def test_create_user_normalizes_email(credential_service):
    user_id = credential_service.create_user("  Alice@Example.COM ", "s3cret", "alice")

    user = credential_service.get_user(user_id)
    assert user.email == "alice@example.com"
    assert credential_service.find_by_email("ALICE@example.com").user_id == user_id


def test_duplicates(credential_service):
    credential_service.create_user("a@b.com", "s3cret", "alice")

    with pytest.raises(DuplicateHandle):
        credential_service.create_user("c@d.com", "s3cret", "alice")
    with pytest.raises(DuplicateEmail):
        credential_service.create_user("A@B.com", "s3cret", "bob")


def test_concurrent_duplicate_handle_exactly_one_succeeds(credential_service):
    barrier = threading.Barrier(8)

    def attempt(index):
        barrier.wait()
        try:
            return credential_service.create_user(f"user{index}@example.com", "s3cret", "racer")
        except DuplicateHandle:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(8)))

    winners = [result for result in results if result is not None]
    assert len(winners) == 1
    assert credential_service.verify_credentials("racer", "s3cret") == winners[0]


def test_create_records_audit_event(credential_service, audit_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    entries = audit_service.list_events(user_id)
    assert [entry.event for entry in entries] == ["account created"]


def test_verification_writes_nothing(credential_service, audit_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    credential_service.verify_credentials("alice", "s3cret")
    with pytest.raises(InvalidCredentials):
        credential_service.verify_credentials("alice", "wrong")

    assert len(audit_service.list_events(user_id)) == 1


def test_inactive_refusal_is_logged(credential_service, caplog):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")
    credential_service.deactivate(user_id)

    with caplog.at_level("WARNING"):
        with pytest.raises(AccountInactive):
            credential_service.verify_credentials("alice", "s3cret")

    assert "account inactive" in caplog.text
    assert "s3cret" not in caplog.text


def test_concurrent_deactivation_records_one_event(credential_service, audit_service):
    for round_index in range(10):
        user_id = credential_service.create_user(f"u{round_index}@example.com", "s3cret", f"user{round_index}")
        barrier = threading.Barrier(8)

        def attempt(_):
            barrier.wait()
            credential_service.deactivate(user_id)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(attempt, range(8)))

        events = [entry.event for entry in audit_service.list_events(user_id)]
        assert events.count("account deactivated") == 1


def test_update_active_flag_records_transitions_only(credential_service, audit_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    credential_service.update_user(user_id, active=False)
    credential_service.update_user(user_id, active=False)
    credential_service.deactivate(user_id)
    credential_service.update_user(user_id, active=True)
    credential_service.update_user(user_id, active=True)

    events = [entry.event for entry in audit_service.list_events(user_id)]
    assert events == ["account created", "account deactivated", "account reactivated"]


def test_update_profile_and_active_together(credential_service, audit_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice")

    user = credential_service.update_user(user_id, language="fr", active=False)

    assert (user.language, user.active) == ("fr", False)
    events = [entry.event for entry in audit_service.list_events(user_id)]
    assert events == ["account created", "account updated: language", "account deactivated"]


def test_empty_name_clears_it(credential_service):
    user_id = credential_service.create_user("a@b.com", "s3cret", "alice", first_name="Alice", last_name="Liddell")

    user = credential_service.update_user(user_id, first_name="")

    assert user.first_name is None
    assert user.last_name == "Liddell"
