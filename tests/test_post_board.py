"""
Tests for the post board controller
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from postboard.components.post_board import (CREATE_FAILED_MESSAGE,
                                             EDIT_FAILED_MESSAGE,
                                             BoardContext, PostBoard)
from postboard.core.exceptions import IdentityError, PostServiceError
from postboard.models.post import Draft, Post, order_newest_first
from postboard.models.user import SessionTokens


async def _create(board: PostBoard, title: str, content: str) -> bool:
    board.draft = Draft(title=title, content=content)
    return await board.add_post()


@pytest.mark.asyncio
async def test_load_anonymous(make_board):
    """Test anonymous load: posts readable, no user, no error"""
    board = make_board()
    await board.load()

    assert board.current_user is None
    assert board.is_authenticated is False
    assert board.posts == []
    assert board.notification is None


@pytest.mark.asyncio
async def test_load_identity(make_board, alice):
    board = make_board(alice)
    await board.load()

    assert board.current_user.username == "alice"


@pytest.mark.asyncio
async def test_load_identity_with_unknown_token(make_board):
    """Test a stale token is treated as signed out, not as an error"""
    board = make_board(SessionTokens(access_token="expired"))
    user = await board.load_identity()

    assert user is None
    assert board.notification is None


@pytest.mark.asyncio
async def test_load_identity_provider_error(post_service):
    """Test provider failures also fall back to signed out"""
    identity = AsyncMock()
    identity.get_current_user.side_effect = IdentityError("provider down")
    board = PostBoard(BoardContext(post_service, identity, SessionTokens(access_token="t")))

    assert await board.load_identity() is None


@pytest.mark.asyncio
async def test_create_adds_exactly_one_owned_post(make_board, alice):
    """Test successful creation adds one post owned by the signed-in user"""
    board = make_board(alice)
    await board.load()
    before = len(board.posts)

    assert await _create(board, "Hello", "World") is True

    assert len(board.posts) == before + 1
    created = [p for p in board.posts if p.title == "Hello"]
    assert len(created) == 1
    assert created[0].content == "World"
    assert created[0].owner == "alice"


@pytest.mark.asyncio
async def test_create_clears_draft(make_board, alice):
    board = make_board(alice)
    await _create(board, "Hello", "World")

    assert board.draft == Draft()


@pytest.mark.asyncio
@pytest.mark.parametrize("title,content", [("", "x"), ("x", "")])
async def test_incomplete_draft_is_a_silent_noop(alice, identity, title, content):
    """Test incomplete draft makes no service call and keeps the draft"""
    service = AsyncMock()
    board = PostBoard(BoardContext(service, identity, alice))
    board.draft = Draft(title=title, content=content)

    assert await board.add_post() is False

    service.create_post.assert_not_called()
    service.list_posts.assert_not_called()
    assert board.draft == Draft(title=title, content=content)
    assert board.notification is None


@pytest.mark.asyncio
async def test_create_without_session_notifies(make_board):
    """Test creation failure maps to the single sign-in message and keeps the draft"""
    board = make_board()
    assert await _create(board, "Hello", "World") is False

    assert board.notification.message == CREATE_FAILED_MESSAGE
    assert board.draft == Draft(title="Hello", content="World")
    assert board.posts == []


@pytest.mark.asyncio
async def test_create_any_failure_uses_same_message(alice, identity):
    service = AsyncMock()
    service.create_post.side_effect = PostServiceError("validation failed", "ValidationError")
    board = PostBoard(BoardContext(service, identity, alice))

    await _create(board, "Hello", "World")

    assert board.notification.message == CREATE_FAILED_MESSAGE
    service.list_posts.assert_not_called()


@pytest.mark.asyncio
async def test_create_refetches_full_list(alice, identity):
    """Test success triggers a full list refresh rather than a local merge"""
    created = Post(id="1", title="Hello", content="World", owner="alice")
    service = AsyncMock()
    service.create_post.return_value = created
    service.list_posts.return_value = []
    board = PostBoard(BoardContext(service, identity, alice))

    await _create(board, "Hello", "World")

    service.list_posts.assert_awaited_once()
    assert board.posts == []


@pytest.mark.asyncio
async def test_refresh_failure_keeps_previous_list(alice, identity):
    """Test read failure is logged only and the shown list stays"""
    shown = [Post(id="1", title="Old", content="c", owner="alice")]
    service = AsyncMock()
    service.list_posts.side_effect = PostServiceError("boom")
    board = PostBoard(BoardContext(service, identity, alice))
    board.posts = list(shown)

    assert await board.refresh_posts() is False

    assert board.posts == shown
    assert board.notification is None


@pytest.mark.asyncio
async def test_posts_ordered_newest_first(identity):
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    service = AsyncMock()
    service.list_posts.return_value = [
        Post(id="old", title="a", content="c", created_at=base),
        Post(id="undated", title="b", content="c"),
        Post(id="new", title="c", content="c", created_at=base + timedelta(days=1)),
    ]
    board = PostBoard(BoardContext(service, identity))

    await board.refresh_posts()

    assert [p.id for p in board.posts] == ["new", "old", "undated"]


def test_ordering_reads_naive_timestamps_as_utc():
    """Test naive and aware timestamps are compared on the same UTC clock"""
    posts = [
        Post(id="aware", title="a", content="c", created_at=datetime(2025, 1, 1, 11, 30, tzinfo=timezone.utc)),
        Post(id="naive", title="b", content="c", created_at=datetime(2025, 1, 1, 12, 0)),
        Post(id="offset", title="c", content="c",
             created_at=datetime(2025, 1, 1, 13, 45, tzinfo=timezone(timedelta(hours=2)))),
    ]

    assert [p.id for p in order_newest_first(posts)] == ["naive", "offset", "aware"]


@pytest.mark.asyncio
async def test_owner_can_edit_title(make_board, alice):
    board = make_board(alice)
    await _create(board, "Hello", "World")
    post = board.posts[0]

    assert await board.submit_edit(post.id, "Hello again") is True

    assert board.posts[0].title == "Hello again"
    assert board.posts[0].content == "World"
    assert board.posts[0].owner == "alice"


@pytest.mark.asyncio
async def test_begin_edit_prefills_current_title(make_board, alice):
    board = make_board(alice)
    await _create(board, "Hello", "World")

    pending = board.begin_edit(board.posts[0].id)

    assert pending.title == "Hello"
    assert board.begin_edit("missing") is None


@pytest.mark.asyncio
async def test_empty_edit_is_noop(alice, identity):
    """Test an empty new title sends nothing and closes the editor"""
    service = AsyncMock()
    board = PostBoard(BoardContext(service, identity, alice))
    board.posts = [Post(id="1", title="Hello", content="World", owner="alice")]
    board.begin_edit("1")

    assert await board.submit_edit("1", "") is False

    service.update_post.assert_not_called()
    assert board.pending_edit is None


@pytest.mark.asyncio
async def test_non_owner_edit_rejected(make_board, alice, bob):
    """Test non-owner update is rejected and the title is unchanged after refresh"""
    alice_board = make_board(alice)
    await _create(alice_board, "Hello", "World")
    post_id = alice_board.posts[0].id

    bob_board = make_board(bob)
    await bob_board.load()

    assert await bob_board.submit_edit(post_id, "Hijacked") is False
    assert bob_board.notification.message == EDIT_FAILED_MESSAGE

    await bob_board.refresh_posts()
    assert bob_board.find_post(post_id).title == "Hello"


@pytest.mark.asyncio
async def test_alice_bob_scenario(make_board, alice, bob):
    """Test alice creates a post; bob sees it without an edit control and cannot edit it"""
    alice_board = make_board(alice)
    await alice_board.load()
    await _create(alice_board, "Hello", "World")

    assert [(p.title, p.content, p.owner) for p in alice_board.posts] == [("Hello", "World", "alice")]
    assert alice_board.render().cards[0].can_edit is True

    bob_board = make_board(bob)
    await bob_board.load()
    view = bob_board.render()
    assert view.cards[0].can_edit is False
    assert view.show_create_form is True

    post_id = bob_board.posts[0].id
    assert await bob_board.submit_edit(post_id, "Mine now") is False
    assert bob_board.render().notification.message == EDIT_FAILED_MESSAGE

    anonymous = make_board()
    await anonymous.load()
    assert anonymous.posts[0].title == "Hello"


@pytest.mark.asyncio
async def test_new_action_dismisses_previous_notification(make_board, alice):
    board = make_board()
    await _create(board, "Hello", "World")
    assert board.notification is not None

    board.draft = Draft()
    await board.add_post()

    assert board.notification is None


@pytest.mark.asyncio
async def test_sign_out(make_board, identity, alice):
    """Test sign-out ends the session and returns to the unauthenticated state"""
    board = make_board(alice)
    await board.load()
    assert board.is_authenticated

    await board.sign_out()

    assert board.is_authenticated is False
    assert board.context.session is None
    assert identity.resolve(alice.access_token) is None


@pytest.mark.asyncio
async def test_sign_out_provider_failure_still_signs_out(post_service, alice):
    identity = AsyncMock()
    identity.sign_out.side_effect = IdentityError("revoke failed")
    board = PostBoard(BoardContext(post_service, identity, alice))

    await board.sign_out()

    assert board.current_user is None
    assert board.context.session is None
