import asyncio
import json

import httpx
import pytest

from notemanager.client.errors import AuthError, AuthErrorKind
from notemanager.client.session import SessionState


def test_login_persists_credential(make_context, tmp_path):
    async def scenario():
        async with make_context() as ctx:
            session = await ctx.login("ada@example.com", "correct-horse")
            return ctx, session

    ctx, session = asyncio.run(scenario())
    assert ctx.session.state == SessionState.AUTHENTICATED
    assert session.user_handle == "ada@example.com"

    stored = json.loads((tmp_path / "state" / "session.json").read_text(encoding="utf-8"))
    assert stored == {"token": "tok-ada@example.com", "userEmail": "ada@example.com"}


def test_wrong_password_stays_anonymous(make_context, fake_remote):
    async def scenario():
        async with make_context() as ctx:
            with pytest.raises(AuthError) as exc_info:
                await ctx.login("ada@example.com", "wrong")
            return ctx, exc_info.value

    ctx, err = asyncio.run(scenario())
    assert err.kind == AuthErrorKind.INVALID_CREDENTIALS
    assert ctx.session.state == SessionState.ANONYMOUS
    assert ctx.notes.notes == []
    assert fake_remote.note_requests() == []


def test_signup_then_login(make_context, fake_remote):
    async def scenario():
        async with make_context() as ctx:
            await ctx.signup("grace@example.com", "hopper")
            return ctx

    ctx = asyncio.run(scenario())
    assert ctx.session.current.user_handle == "grace@example.com"
    assert [r.url.path for r in fake_remote.requests] == [
        "/api/auth/signup",
        "/api/auth/login",
        "/api/notes",
    ]


def test_signup_duplicate_email(make_context):
    async def scenario():
        async with make_context() as ctx:
            with pytest.raises(AuthError) as exc_info:
                await ctx.signup("ada@example.com", "whatever")
            return ctx, exc_info.value

    ctx, err = asyncio.run(scenario())
    assert err.kind == AuthErrorKind.DUPLICATE_EMAIL
    assert not ctx.session.is_authenticated


def test_login_server_fault(make_context, fake_remote):
    fake_remote.force("POST", "/api/auth/login", 500)

    async def scenario():
        async with make_context() as ctx:
            with pytest.raises(AuthError) as exc_info:
                await ctx.login("ada@example.com", "correct-horse")
            return exc_info.value

    assert asyncio.run(scenario()).kind == AuthErrorKind.SERVER_FAULT


def test_login_network_failure(make_context):
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with make_context(httpx.MockTransport(unreachable)) as ctx:
            with pytest.raises(AuthError) as exc_info:
                await ctx.login("ada@example.com", "correct-horse")
            return ctx, exc_info.value

    ctx, err = asyncio.run(scenario())
    assert err.kind == AuthErrorKind.NETWORK
    assert ctx.session.state == SessionState.ANONYMOUS


def test_restore_adopts_stored_credential_without_request(make_context, fake_remote, tmp_path):
    state = tmp_path / "state"
    state.mkdir()
    (state / "session.json").write_text(json.dumps({"token": "tok-x", "userEmail": "x@example.com"}), encoding="utf-8")

    async def scenario():
        async with make_context() as ctx:
            session = ctx.session.restore()
            return ctx, session

    ctx, session = asyncio.run(scenario())
    assert session.token == "tok-x"
    assert ctx.session.state == SessionState.AUTHENTICATED
    assert fake_remote.requests == []


def test_restore_without_file_is_anonymous(make_context):
    async def scenario():
        async with make_context() as ctx:
            return ctx, await ctx.start()

    ctx, session = asyncio.run(scenario())
    assert session is None
    assert ctx.session.state == SessionState.ANONYMOUS


def test_logout_clears_everything(make_context, tmp_path):
    async def scenario():
        async with make_context() as ctx:
            await ctx.login("ada@example.com", "correct-horse")
            ctx.notes.add("keep me?")
            await ctx.notes.drain()
            ctx.logout()
            return ctx

    ctx = asyncio.run(scenario())
    assert ctx.session.state == SessionState.ANONYMOUS
    assert ctx.notes.notes == []
    assert not (tmp_path / "state" / "session.json").exists()


def test_every_transition_bumps_epoch_and_notifies(make_context):
    seen = []

    async def scenario():
        async with make_context() as ctx:
            ctx.session.add_listener(seen.append)
            start = ctx.session.epoch
            await ctx.login("ada@example.com", "correct-horse")
            ctx.session.invalidate()
            ctx.session.invalidate()
            return ctx.session.epoch - start

    assert asyncio.run(scenario()) == 2
    assert seen == [SessionState.AUTHENTICATED, SessionState.ANONYMOUS]
