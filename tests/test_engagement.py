import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import AlreadyInDesiredState, DomainError, NotFound
from app.database import Base
from app.models.reaction import Reaction
from app.models.user import User
from app.models.video import Video
from app.services.engagement import comment_engagement, video_engagement


def test_like_then_dislike_scenario(db, make_user, make_video):
    owner, u1, u2 = make_user(), make_user(), make_user()
    video = make_video(owner)
    
    assert video_engagement.counts(db, video.id).model_dump() == {"likes": 0, "dislikes": 0}
    assert video_engagement.like(db, video.id, u1.id).model_dump() == {"likes": 1, "dislikes": 0}
    assert video_engagement.dislike(db, video.id, u1.id).model_dump() == {"likes": 0, "dislikes": 1}
    assert video_engagement.like(db, video.id, u2.id).model_dump() == {"likes": 1, "dislikes": 1}
    assert video_engagement.undislike(db, video.id, u1.id).model_dump() == {"likes": 1, "dislikes": 0}


def test_like_twice_fails(db, make_user, make_video):
    user = make_user()
    video = make_video(user)
    video_engagement.like(db, video.id, user.id)
    
    with pytest.raises(AlreadyInDesiredState) as exc_info:
        video_engagement.like(db, video.id, user.id)
    assert exc_info.value.message == "Video already liked"
    assert video_engagement.counts(db, video.id).likes == 1


def test_dislike_twice_fails(db, make_user, make_video, make_comment):
    user = make_user()
    comment = make_comment(make_video(user), user)
    comment_engagement.dislike(db, comment.id, user.id)
    
    with pytest.raises(AlreadyInDesiredState) as exc_info:
        comment_engagement.dislike(db, comment.id, user.id)
    assert exc_info.value.message == "Comment already disliked"


def test_like_then_unlike_restores_counts(db, make_user, make_video):
    owner, fan = make_user(), make_user()
    video = make_video(owner)
    video_engagement.dislike(db, video.id, owner.id)
    before = video_engagement.counts(db, video.id)
    
    video_engagement.like(db, video.id, fan.id)
    after = video_engagement.unlike(db, video.id, fan.id)
    
    assert after == before


def test_remove_operations_are_idempotent(db, make_user, make_video):
    user = make_user()
    video = make_video(user)
    
    assert video_engagement.unlike(db, video.id, user.id).model_dump() == {"likes": 0, "dislikes": 0}
    assert video_engagement.undislike(db, video.id, user.id).model_dump() == {"likes": 0, "dislikes": 0}
    
    video_engagement.like(db, video.id, user.id)
    # undislike must not touch an existing like
    assert video_engagement.undislike(db, video.id, user.id).model_dump() == {"likes": 1, "dislikes": 0}


def test_status_reports_at_most_one_state(db, make_user, make_video):
    user = make_user()
    video = make_video(user)
    
    assert video_engagement.status(db, video.id, user.id).model_dump() == {"liked": False, "disliked": False}
    video_engagement.like(db, video.id, user.id)
    assert video_engagement.status(db, video.id, user.id).model_dump() == {"liked": True, "disliked": False}
    video_engagement.dislike(db, video.id, user.id)
    assert video_engagement.status(db, video.id, user.id).model_dump() == {"liked": False, "disliked": True}


def test_missing_target_raises_not_found(db, make_user):
    user = make_user()
    with pytest.raises(NotFound):
        video_engagement.like(db, 999, user.id)
    with pytest.raises(NotFound):
        comment_engagement.unlike(db, 999, user.id)
    with pytest.raises(NotFound):
        comment_engagement.status(db, 999, user.id)


def test_video_and_comment_reactions_are_independent(db, make_user, make_video, make_comment):
    user = make_user()
    video = make_video(user)
    comment = make_comment(video, user)
    # Same numeric id on both target kinds must not collide
    assert video.id == comment.id
    
    video_engagement.like(db, video.id, user.id)
    comment_engagement.dislike(db, comment.id, user.id)
    
    assert video_engagement.status(db, video.id, user.id).liked is True
    assert comment_engagement.status(db, comment.id, user.id).disliked is True


def test_concurrent_toggles_never_leave_user_in_both_sets(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'engagement.db'}",
        connect_args={"check_same_thread": False, "timeout": 30}
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    
    setup = Session()
    users = [User(email=f"c{i}@example.com", username=f"c{i}", password="not-a-real-hash") for i in range(4)]
    setup.add_all(users)
    setup.commit()
    video = Video(
        ownerId=users[0].id, title="Race", videoUrl="/v.mp4", thumbnailUrl="/t.jpg"
    )
    setup.add(video)
    setup.commit()
    user_ids = [user.id for user in users]
    video_id = video.id
    setup.close()
    
    unexpected = []
    
    def worker(user_id, index):
        operations = [
            video_engagement.like,
            video_engagement.dislike,
            video_engagement.unlike,
            video_engagement.undislike,
        ]
        session = Session()
        try:
            for step in range(20):
                operation = operations[(index + step) % len(operations)]
                try:
                    operation(session, video_id, user_id)
                except DomainError:
                    pass
                except Exception as exc:
                    unexpected.append(exc)
        finally:
            session.close()
    
    threads = [
        threading.Thread(target=worker, args=(user_id, index))
        for user_id in user_ids
        for index in range(3)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    
    assert unexpected == []
    
    check = Session()
    try:
        for user_id in user_ids:
            rows = check.query(Reaction).filter(
                Reaction.userId == user_id,
                Reaction.targetId == video_id
            ).all()
            assert len(rows) <= 1
        counts = video_engagement.counts(check, video_id)
        assert counts.likes + counts.dislikes == check.query(Reaction).count()
    finally:
        check.close()
        engine.dispose()
