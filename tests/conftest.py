import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="vidshare-uploads-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.security import create_access_token, hash_password
from app.database import Base, build_engine, get_db
from app.main import app
from app.models.comment import Comment
from app.models.user import User, UserRole
from app.models.video import Video, VideoCategory

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()
    
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}
    
    def _make_user(username=None, role=UserRole.user):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        user = User(
            email=f"{username}@example.com",
            username=username,
            password=PASSWORD_HASH,
            role=role
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    
    return _make_user


@pytest.fixture
def make_video(db):
    def _make_video(owner, title="Sample video", category=VideoCategory.entertainment,
                    views=0, description=None, tags=None):
        video = Video(
            ownerId=owner.id,
            title=title,
            description=description,
            videoUrl="/uploads/videos/sample.mp4",
            thumbnailUrl="/uploads/thumbnails/sample.jpg",
            duration=12.5,
            views=views,
            category=category,
            tags=tags or []
        )
        db.add(video)
        db.commit()
        db.refresh(video)
        return video
    
    return _make_video


@pytest.fixture
def make_comment(db):
    def _make_comment(video, user, content="Nice video", parent=None):
        comment = Comment(
            videoId=video.id,
            userId=user.id,
            content=content,
            parentId=parent.id if parent else None
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment
    
    return _make_comment


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    
    return _auth_headers
