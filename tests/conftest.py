# tests/conftest.py
import os
import tempfile

# Settings are cached on first import; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="storefront-uploads-")
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.main import app
from storefront.application.services.auth_service import issue_token
from storefront.domain.models.category import Category
from storefront.domain.models.location import Location
from storefront.domain.models.product import Product
from storefront.domain.models.user import User
from storefront.infrastructure.database import Base, build_engine, get_db
from storefront.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from storefront.infrastructure.storage import ImageStorage
from storefront.interfaces.deps import get_image_storage

engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repo(db):
    return SQLAlchemyProductRepository(db, Product)


@pytest.fixture
def storage(tmp_path):
    return ImageStorage(root=str(tmp_path / "uploads"), url_prefix="/uploads")


@pytest.fixture
def client(db, storage):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def location(db):
    loc = Location(name="Douala Akwa", address="Rue Joss", phone="+237600000001")
    db.add(loc)
    db.commit()
    return loc


@pytest.fixture
def other_location(db):
    loc = Location(name="Yaounde Centre", address="Avenue Kennedy")
    db.add(loc)
    db.commit()
    return loc


@pytest.fixture
def category(db):
    cat = Category(name="Smartphones", description="Phones")
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture
def make_user(db):
    def _make(email, password="secret123", **fields):
        user = User(email=email, **fields)
        user.password = password
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def super_admin(make_user):
    return make_user("root@example.com", is_admin=True, is_super_admin=True, name="Root")


@pytest.fixture
def store_admin(make_user, location):
    return make_user(
        "douala@example.com",
        is_admin=True,
        location_id=location.id,
        name="Douala Manager",
        whatsapp_number="+237699000111",
    )


@pytest.fixture
def customer(make_user):
    return make_user("someone@example.com")


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _headers


@pytest.fixture
def make_product(db, category, location):
    def _make(**fields):
        data = {
            "name": "iPhone 15",
            "price": 650000,
            "category_id": category.id,
            "location_id": location.id,
            "quantity": 10,
        }
        data.update(fields)
        product = Product(**data)
        db.add(product)
        db.commit()
        return product

    return _make
