"""Async service with explicitly declared parameter names."""
import asyncio

from core_decorators import decorate, operation

_USERS = {1: {"id": 1, "username": "john"}}


@operation(params=["id"], schema={"id": int})
async def get_user(user_id):
    await asyncio.sleep(0.01)
    if user_id in _USERS:
        return _USERS[user_id]
    raise LookupError("User not found")


UserService = {"get_user": get_user}
decorate(UserService, "UserService")


async def run() -> None:
    print(await UserService["get_user"](1))
    try:
        await UserService["get_user"](222)
    except LookupError as exc:
        print(f"failed: {exc}")


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
