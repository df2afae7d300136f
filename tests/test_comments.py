import pytest

from app.core.exceptions import Forbidden, InvalidInput, NotFound
from app.models.comment import Comment
from app.models.reaction import Reaction
from app.models.user import UserRole
from app.services import comment_service
from app.services.engagement import comment_engagement


def test_create_top_level_comment(db, make_user, make_video):
    user = make_user()
    video = make_video(user)
    
    comment = comment_service.create_comment(db, video.id, user, "  First!  ")
    
    assert comment.content == "First!"
    assert comment.parentId is None
    assert comment.replies == []
    assert comment.user.username == user.username


def test_create_comment_validation(db, make_user, make_video):
    user = make_user()
    video = make_video(user)
    
    with pytest.raises(InvalidInput):
        comment_service.create_comment(db, video.id, user, "")
    with pytest.raises(InvalidInput):
        comment_service.create_comment(db, video.id, user, None)
    with pytest.raises(NotFound):
        comment_service.create_comment(db, 999, user, "hello")
    assert db.query(Comment).count() == 0


def test_reply_must_reference_existing_comment_on_same_video(db, make_user, make_video, make_comment):
    user = make_user()
    video = make_video(user)
    other_video = make_video(user)
    foreign_parent = make_comment(other_video, user)
    
    with pytest.raises(NotFound):
        comment_service.create_comment(db, video.id, user, "reply", parent_id=999)
    with pytest.raises(InvalidInput):
        comment_service.create_comment(db, video.id, user, "reply", parent_id=foreign_parent.id)


def test_replies_cannot_nest(db, make_user, make_video, make_comment):
    user = make_user()
    video = make_video(user)
    parent = make_comment(video, user)
    reply = make_comment(video, user, parent=parent)
    
    with pytest.raises(InvalidInput):
        comment_service.create_comment(db, video.id, user, "deeper", parent_id=reply.id)


def test_parent_lists_replies(db, make_user, make_video):
    user = make_user()
    video = make_video(user)
    parent = comment_service.create_comment(db, video.id, user, "parent")
    first = comment_service.create_comment(db, video.id, user, "one", parent_id=parent.id)
    second = comment_service.create_comment(db, video.id, user, "two", parent_id=parent.id)
    
    top_level = comment_service.list_video_comments(db, video.id)
    
    assert [c.id for c in top_level] == [parent.id]
    assert top_level[0].replies == [first.id, second.id]


def test_ordering_top_level_newest_and_replies_oldest(db, make_user, make_video, make_comment):
    user = make_user()
    video = make_video(user)
    older = make_comment(video, user, "older")
    newer = make_comment(video, user, "newer")
    reply_a = make_comment(video, user, "a", parent=older)
    reply_b = make_comment(video, user, "b", parent=older)
    
    assert [c.id for c in comment_service.list_video_comments(db, video.id)] == [newer.id, older.id]
    assert [c.id for c in comment_service.list_replies(db, older.id)] == [reply_a.id, reply_b.id]


def test_list_replies_missing_comment(db):
    with pytest.raises(NotFound):
        comment_service.list_replies(db, 42)


def test_update_comment(db, make_user, make_video, make_comment):
    author, stranger = make_user(), make_user()
    admin = make_user(role=UserRole.admin)
    comment = make_comment(make_video(author), author)
    
    assert comment_service.update_comment(db, comment.id, author, "edited").content == "edited"
    with pytest.raises(InvalidInput):
        comment_service.update_comment(db, comment.id, author, "  ")
    with pytest.raises(Forbidden):
        comment_service.update_comment(db, comment.id, stranger, "mine now")
    assert comment_service.update_comment(db, comment.id, admin, "moderated").content == "moderated"


def test_delete_top_level_removes_replies(db, make_user, make_video, make_comment):
    user = make_user()
    video = make_video(user)
    parent = make_comment(video, user)
    replies = [make_comment(video, user, parent=parent) for _ in range(3)]
    sibling = make_comment(video, user)
    comment_engagement.like(db, replies[0].id, user.id)
    comment_engagement.like(db, sibling.id, user.id)
    
    removed = comment_service.delete_comment(db, parent.id, user)
    
    assert removed == 4
    remaining = [row[0] for row in db.query(Comment.id).all()]
    assert remaining == [sibling.id]
    assert db.query(Reaction).count() == 1


def test_delete_reply_unlinks_only_that_reply(db, make_user, make_video, make_comment):
    user = make_user()
    video = make_video(user)
    parent = make_comment(video, user)
    replies = [make_comment(video, user, parent=parent) for _ in range(3)]
    
    comment_service.delete_comment(db, replies[1].id, user)
    
    remaining = comment_service.list_replies(db, parent.id)
    assert [r.id for r in remaining] == [replies[0].id, replies[2].id]
    parent_view = comment_service.list_video_comments(db, video.id)[0]
    assert parent_view.replies == [replies[0].id, replies[2].id]


def test_delete_comment_authorization(db, make_user, make_video, make_comment):
    author, stranger = make_user(), make_user()
    admin = make_user(role=UserRole.admin)
    comment = make_comment(make_video(author), author)
    comment_id = comment.id
    
    with pytest.raises(Forbidden):
        comment_service.delete_comment(db, comment.id, stranger)
    assert db.query(Comment).count() == 1
    
    comment_service.delete_comment(db, comment_id, admin)
    assert db.query(Comment).count() == 0
    with pytest.raises(NotFound):
        comment_service.delete_comment(db, comment_id, admin)
