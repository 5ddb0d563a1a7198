import os

# Configuration must be in place before the app (and database.py) is imported
TEST_ENCRYPTION_KEY = "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"
TEST_ENCRYPTION_IV = "0f0e0d0c0b0a09080706050403020100"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENCRYPTION_KEY", TEST_ENCRYPTION_KEY)
os.environ.setdefault("ENCRYPTION_IV", TEST_ENCRYPTION_IV)
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from database import Base, get_db
from app import app
from models.access_code import AccessCode
from services.code_store import AccessCodeStore
from services.session_store import DeviceSessionStore
from utils.cipher import CodeCipher

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()


@pytest.fixture
def cipher():
    return CodeCipher(bytes.fromhex(TEST_ENCRYPTION_KEY), bytes.fromhex(TEST_ENCRYPTION_IV))


@pytest.fixture
def code_store(db, cipher):
    return AccessCodeStore(db, cipher)


@pytest.fixture
def session_store(db):
    return DeviceSessionStore(db)


@pytest.fixture
def seeded_code(db, cipher):
    """Insert a single known access code and return its plaintext"""
    code = "X1"
    db.add(AccessCode(code=code, encrypted_code=cipher.encrypt(code)))
    db.commit()
    return code


@pytest.fixture
def client(db):
    def override_get_db():
        yield db
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def test_engine():
    return engine


@pytest.fixture
def session_factory():
    return TestingSessionLocal
