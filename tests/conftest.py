import os
import shutil
import sys
import tempfile
from datetime import date, datetime, timezone

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Settings are read at import time, so point them somewhere harmless first
os.environ["DATABASE_URL"] = "sqlite://"
UPLOAD_ROOT = tempfile.mkdtemp(prefix="pitch2angels-uploads-")
os.environ["UPLOAD_DIR"] = UPLOAD_ROOT
os.environ["ADMIN_API_KEY"] = ""
os.environ["ENVIRONMENT"] = "test"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pitch2angels.database import Base, get_db
from pitch2angels.main import app as fastapi_app
from pitch2angels.models import Application
from pitch2angels.utils.upload import LocalBlobStore, get_blob_store

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PDF_BYTES = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<<>>\nendobj\n"

DESCRIPTION = (
    "We turn cassava peels into affordable livestock feed for smallholder "
    "farmers across the Ashanti region."
)


def build_form(**overrides):
    form = {
        "firstName": "Ada",
        "lastName": "Mensah",
        "phone": "+233201234567",
        "email": "ada@example.com",
        "city": "Kumasi",
        "region": "Ashanti",
        "pronouns": "she/her",
        "occupation": "Engineer",
        "businessName": "Acme Feeds",
        "website": "https://acmefeeds.example.com",
        "categories": '["Agriculture / Agritech", "Manufacturing"]',
        "phase": "prototype",
        "hasCollaborators": "no",
        "description": DESCRIPTION,
        "bankName": "GCB Bank",
        "accountHolderName": "Ada Mensah",
        "transactionReference": "TXN-0001",
        "amountPaid": "150.00",
        "paymentDate": "2025-01-15",
        "agreedToTerms": "true",
        "signature": "Ada Mensah",
    }
    form.update(overrides)
    return {key: value for key, value in form.items() if value is not None}


def build_files(product_image=None, payment_receipt=None):
    return {
        "productImage": product_image or ("product.png", PNG_BYTES, "image/png"),
        "paymentReceipt": payment_receipt or ("receipt.pdf", PDF_BYTES, "application/pdf"),
    }


@pytest.fixture(scope="session", autouse=True)
def remove_upload_root():
    yield
    shutil.rmtree(UPLOAD_ROOT, ignore_errors=True)


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def blob_store(upload_dir):
    return LocalBlobStore(upload_dir, base_url="http://testserver/static/uploads")


@pytest.fixture
def app(session_factory, blob_store):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def submit(client):
    def _submit(files=None, **overrides):
        return client.post(
            "/api/applications",
            data=build_form(**overrides),
            files=build_files() if files is None else files,
        )
    return _submit


@pytest.fixture
def make_application(db_session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = dict(
            first_name="Applicant",
            last_name=f"Number{n}",
            phone="0200000000",
            email=f"applicant{n}@example.com",
            city="Accra",
            region="Greater Accra",
            business_name=f"Venture {n}",
            categories=["Technology"],
            phase="idea",
            has_collaborators="no",
            description=DESCRIPTION,
            product_image=f"http://testserver/static/uploads/products/p{n}.png",
            payment_receipt=f"http://testserver/static/uploads/receipts/r{n}.pdf",
            bank_name="GCB Bank",
            account_holder_name="Applicant",
            transaction_reference=f"TXN-{n:04d}",
            amount_paid=100.0,
            payment_date=date(2025, 1, 15),
            agreed_to_terms=True,
            signature="Applicant",
            created_at=datetime.now(timezone.utc),
        )
        fields.update(overrides)
        application = Application(**fields)
        db_session.add(application)
        db_session.commit()
        db_session.refresh(application)
        return application

    return _make
