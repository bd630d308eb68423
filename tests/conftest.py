import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SQLALCHEMY_DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.database as database
import app.models  # noqa: F401
from app.database import get_session
from app.main import app
from app.models.address import Address
from app.models.catalog import Brand, Color, Size
from app.models.category import Category
from app.models.product import Product, ProductDetails, ProductImage, Variant
from app.models.user import User
from app.utils.cache_helpers import clear_category_cache
from app.utils.token import create_access_token


@pytest.fixture(name="engine")
def engine_fixture(monkeypatch):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    # cached readers open their own session from the module engine
    monkeypatch.setattr(database, "engine", engine)
    clear_category_cache()
    yield engine
    clear_category_cache()
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def _make_user(session: Session, email: str, role: str = "user", can_login: bool = True) -> User:
    user = User(name=email.split("@")[0].title(), email=email, password="x", role=role, can_login=can_login)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'user_id': user.id})}"}


@pytest.fixture(name="user")
def user_fixture(session):
    return _make_user(session, "asha@example.com")


@pytest.fixture(name="other_user")
def other_user_fixture(session):
    return _make_user(session, "ravi@example.com")


@pytest.fixture(name="admin")
def admin_fixture(session):
    return _make_user(session, "admin@example.com", role="admin")


@pytest.fixture(name="headers")
def headers_fixture(user):
    return auth_headers(user)


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin):
    return auth_headers(admin)


@pytest.fixture(name="address")
def address_fixture(session, user):
    address = Address(
        user_id=user.id,
        name="Asha",
        phone_number="9999999999",
        address="12 MG Road",
        city="Bengaluru",
        state="KA",
        pincode="560001",
        default=True,
    )
    session.add(address)
    session.commit()
    session.refresh(address)
    return address


@pytest.fixture(name="catalog")
def catalog_fixture(session):
    """
    sofa:  1000 (mrp 1200), stock 5, delivery 100, sla 3
    chair: 500 (mrp 600), untracked stock, delivery 50, one blue variant at 550 (stock 2)
    lamp:  250 (mrp 300), stock 10, no delivery charge
    """
    brand = Brand(name="Woodline")
    red = Color(label="Red", hex_code="#ff0000")
    blue = Color(label="Blue", hex_code="#0000ff")
    size = Size(title="Large")
    living = Category(title="Living Room")
    session.add_all([brand, red, blue, size, living])
    session.commit()

    seating = Category(title="Seating", parent_id=living.id)
    session.add(seating)
    session.commit()

    sofa = Product(title="Sofa", brand_id=brand.id, category_id=seating.id, color_id=red.id,
                   size_id=size.id, mrp=1200, selling_price=1000, stock=5)
    chair = Product(title="Chair", brand_id=brand.id, category_id=seating.id, color_id=red.id,
                    mrp=600, selling_price=500)
    lamp = Product(title="Lamp", category_id=living.id, mrp=300, selling_price=250, stock=10)
    session.add_all([sofa, chair, lamp])
    session.commit()

    blue_chair = Variant(product_id=chair.id, sku="CH-BLUE", mrp=700, selling_price=550, stock=2, color_id=blue.id)
    session.add(blue_chair)
    session.commit()

    session.add_all([
        ProductDetails(product_id=sofa.id, sla=3, delivery_charges=100),
        ProductDetails(product_id=chair.id, sla=2, delivery_charges=50),
        ProductDetails(product_id=lamp.id, sla=None, delivery_charges=None),
        ProductImage(product_id=sofa.id, url="sofa.jpg", alt="Sofa", is_main=True),
        ProductImage(product_id=chair.id, url="chair.jpg", alt="Chair", is_main=True),
        ProductImage(variant_id=blue_chair.id, url="chair-blue.jpg", alt="Blue chair", is_main=True),
    ])
    session.commit()

    return SimpleNamespace(
        brand=brand, red=red, blue=blue, size=size,
        living=living, seating=seating,
        sofa=sofa, chair=chair, lamp=lamp, blue_chair=blue_chair,
    )
