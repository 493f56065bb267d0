import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from api.models import Session
from api.services.verification import (
    VerificationService,
    generate_code,
    looks_like_code,
    CODE_MATCH,
    CODE_MISMATCH,
    CODE_EXPIRED,
    CODE_MISSING,
)
from lib.error_handler import AppError
from lib.phone import is_phone_number, normalize_phone

@pytest.mark.parametrize("text,expected", [
    ("7195550123", "7195550123"),
    ("1-719-555-0123", "7195550123"),
    ("(954) 242-8156", "9542428156"),
    ("719.555.0123 ext 42", "7195550123"),
])
def test_normalize_phone(text, expected):
    assert is_phone_number(text)
    assert normalize_phone(text) == expected

def test_rejects_non_numbers():
    assert not is_phone_number("what year is it, 2033?")
    assert not is_phone_number("")
    assert normalize_phone("hello") is None

def test_looks_like_code():
    assert looks_like_code("-123456")
    assert looks_like_code(" - 123456 ")
    assert not looks_like_code("719-555-0123")
    assert not looks_like_code("123456")

def test_generate_code_is_unsigned_32_bit():
    for _ in range(50):
        code = generate_code()
        assert code.isdigit()
        assert 0 <= int(code) < 2**32

@pytest.mark.asyncio
async def test_issue_code_stores_and_sends(mock_sms_service):
    service = VerificationService(mock_sms_service)
    session = Session(user_id="web-user")

    code = await service.issue_code(session, "1 (719) 555-0123")

    assert session.sacred_code == code
    assert session.phone_number == "7195550123"
    mock_sms_service.send_message.assert_awaited_once_with("7195550123", f"Sacred Code: -{code}")
    mock_sms_service.notify_admins.assert_awaited_once_with(f"Sacred Code: -{code}")

@pytest.mark.asyncio
async def test_issue_code_rejects_bad_number(mock_sms_service):
    service = VerificationService(mock_sms_service)

    with pytest.raises(ValueError):
        await service.issue_code(Session(user_id="web-user"), "no number here")
    mock_sms_service.send_message.assert_not_awaited()

@pytest.mark.asyncio
async def test_issue_code_failure_leaves_session_untouched(mock_sms_service):
    mock_sms_service.send_message = AsyncMock(side_effect=AppError("Invalid number"))
    service = VerificationService(mock_sms_service)
    session = Session(user_id="web-user", phone_number="9545550100")

    with pytest.raises(AppError):
        await service.issue_code(session, "719-555-0123")

    assert session.sacred_code == ''
    assert session.code_issued_at is None
    assert session.phone_number == "9545550100"
    mock_sms_service.notify_admins.assert_not_awaited()

@pytest.mark.asyncio
async def test_issue_code_stamps_aware_utc_time(mock_sms_service):
    service = VerificationService(mock_sms_service)
    session = Session(user_id="web-user")

    await service.issue_code(session, "719-555-0123")

    assert session.code_issued_at.tzinfo is not None
    assert session.code_issued_at.utcoffset() == timedelta(0)

def test_check_code(mock_sms_service):
    service = VerificationService(mock_sms_service, code_ttl_minutes=10)
    issued = datetime(2024, 1, 1, 12, 0, 0)
    session = Session(user_id="u", sacred_code="3141592653", code_issued_at=issued)
    soon = issued + timedelta(minutes=5)

    assert service.check_code(session, "-3141592653", now=soon) == CODE_MATCH
    assert service.check_code(session, "-2718281828", now=soon) == CODE_MISMATCH
    assert service.check_code(session, "-3141592653", now=issued + timedelta(minutes=11)) == CODE_EXPIRED
    assert service.check_code(Session(user_id="u"), "-3141592653") == CODE_MISSING

def test_check_code_with_aware_timestamp(mock_sms_service):
    """Rows read back from Postgres may carry a UTC offset"""
    service = VerificationService(mock_sms_service, code_ttl_minutes=10)
    issued = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    session = Session(user_id="u", sacred_code="42", code_issued_at=issued)

    assert service.check_code(session, "-42", now=datetime(2024, 1, 1, 12, 5)) == CODE_MATCH
    assert service.check_code(session, "-42", now=datetime(2024, 1, 1, 12, 30)) == CODE_EXPIRED
