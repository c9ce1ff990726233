"""Unit tests for PendingRequest."""

import pytest

from daoshell.domain.exceptions import IdentityWriteError, RecoverableError
from daoshell.models.requests import PendingRequest


@pytest.mark.asyncio
async def test_resolve_completes_future():
    request = PendingRequest()
    request.resolve("ok")

    assert request.done
    assert await request.future == "ok"


@pytest.mark.asyncio
async def test_resolve_and_reject_are_idempotent():
    request = PendingRequest()
    request.resolve(1)
    request.resolve(2)
    request.reject(RuntimeError("late"))

    assert await request.future == 1


@pytest.mark.asyncio
async def test_string_reason_is_wrapped():
    request = PendingRequest()
    request.reject("no")

    with pytest.raises(RecoverableError, match="no"):
        await request.future


@pytest.mark.asyncio
async def test_custom_error_type():
    request = PendingRequest(error_type=IdentityWriteError)
    request.reject("disk full")

    with pytest.raises(IdentityWriteError):
        await request.future


@pytest.mark.asyncio
async def test_exception_reason_kept():
    request = PendingRequest()
    error = ValueError("bad")
    request.reject(error)

    with pytest.raises(ValueError) as exc_info:
        await request.future
    assert exc_info.value is error
