import asyncio
import inspect

import pytest

from core_decorators import ValidationError, decorate, operation
from core_logging import current_correlation_id

_USER = {"id": 1, "username": "john"}


@pytest.fixture
def users(recorder):
    @operation(params=["id"], schema={"id": int})
    async def get_user(user_id):
        if user_id == 1:
            await asyncio.sleep(0.01)
            return _USER
        raise LookupError("User not found")

    service = {"getUser": get_user}
    decorate(service, "UserService")
    return service


@pytest.mark.asyncio
async def test_get_user(users, recorder):
    user = await users["getUser"](1)
    assert user is _USER
    assert recorder.debug_payloads() == [
        (1, "ENTER getUser:", "{'id': 1}"),
        (1, " EXIT getUser:", "{'id': 1, 'username': 'john'}"),
    ]


@pytest.mark.asyncio
async def test_wrapper_stays_a_coroutine_function(users):
    assert inspect.iscoroutinefunction(users["getUser"])
    assert users["getUser"].synchronous is False


@pytest.mark.asyncio
async def test_validation_error_is_deferred(users, recorder):
    pending = users["getUser"]({"foo": "bar"})  # must not raise here
    with pytest.raises(ValidationError, match='"id"'):
        await pending
    ctx, msg, rest = recorder.error_calls[0]
    assert ctx == {"id": 1}
    assert msg == "ERROR getUser: {'id': {'foo': 'bar'}}"
    assert rest["error_code"] == "validation_failed"


@pytest.mark.asyncio
async def test_rejection_is_logged_and_repropagated(users, recorder):
    with pytest.raises(LookupError, match="User not found"):
        await users["getUser"]("2")
    assert len(recorder.error_calls) == 1
    ctx, msg, rest = recorder.error_calls[0]
    assert ctx == {"id": 1}
    assert msg == "ERROR getUser: {'id': '2'}"
    assert rest["error_code"] == "operation_failed"
    assert [m for _, m, _ in recorder.debug_calls] == ["ENTER getUser:"]


@pytest.mark.asyncio
async def test_declared_async_plain_function_never_raises_synchronously(recorder):
    @operation(schema={"n": int}, synchronous=False)
    def double(n):
        return n * 2

    service = {"double": double}
    decorate(service, "MathService")
    assert await service["double"]("4") == 8
    pending = service["double"]("four")
    with pytest.raises(ValidationError):
        await pending


@pytest.mark.asyncio
async def test_sync_function_returning_awaitable_settles_before_exit(recorder):
    async def _load(key):
        await asyncio.sleep(0)
        return {"key": key}

    def fetch(key):
        return _load(key)

    service = {"fetch": fetch}
    decorate(service, "CacheService")
    pending = service["fetch"]("k")
    assert [m for _, m, _ in recorder.debug_calls] == ["ENTER fetch:"]
    assert await pending == {"key": "k"}
    assert recorder.debug_payloads()[-1] == (1, " EXIT fetch:", "{'key': 'k'}")


@pytest.mark.asyncio
async def test_remove_output_for_async_result(recorder):
    @operation(remove_output=True)
    async def issue_token(user):
        return {"token": "abc"}

    service = {"issueToken": issue_token}
    decorate(service, "AuthService")
    assert await service["issueToken"]("john") == {"token": "abc"}
    assert recorder.debug_payloads()[-1] == (1, " EXIT issueToken:", "<removed>")


@pytest.mark.asyncio
async def test_correlation_id_is_bound_while_operation_runs(recorder):
    async def whoami():
        await asyncio.sleep(0)
        return current_correlation_id()

    service = {"whoami": whoami}
    decorate(service, "CtxService")
    assert await service["whoami"]() == 1
    assert await service["whoami"]() == 2
    assert current_correlation_id() is None


@pytest.mark.asyncio
async def test_concurrent_calls_get_distinct_ids(users, recorder):
    await asyncio.gather(users["getUser"](1), users["getUser"](1), users["getUser"](1))
    enters = sorted(cid for cid, msg, _ in recorder.debug_payloads() if msg.startswith("ENTER"))
    exits = sorted(cid for cid, msg, _ in recorder.debug_payloads() if msg.startswith(" EXIT"))
    assert enters == exits == [1, 2, 3]
