"""
Pytest configuration and global fixtures.
"""
import itertools
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from data.database import DatabaseManager
from data.db_models import Base
from editor.store import BoxStore


@pytest.fixture(scope="session")
def test_db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def test_db_session(test_db_engine):
    """Create fresh database session for each test."""
    Session = sessionmaker(bind=test_db_engine)
    session = Session()

    yield session

    # Rollback any uncommitted changes and close
    session.rollback()
    session.close()


@pytest.fixture
def db_manager(tmp_path):
    """Database manager on a throwaway SQLite file."""
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'presets.db'}")
    manager.create_tables()
    yield manager
    manager.engine.dispose()


@pytest.fixture
def id_factory():
    """Deterministic box ids: box-1, box-2, ..."""
    counter = itertools.count(1)
    return lambda: f"box-{next(counter)}"


@pytest.fixture
def store(id_factory):
    """Empty store with predictable ids."""
    return BoxStore(id_factory=id_factory)


@pytest.fixture
def sample_image():
    """Small two-colour test image."""
    from PIL import Image

    img = Image.new('RGB', (200, 100), color='white')
    for x in range(100, 200):
        for y in range(100):
            img.putpixel((x, y), (0, 0, 0))
    return img


@pytest.fixture
def loaded_store(store, sample_image):
    """Store with the sample image loaded."""
    store.load_image(sample_image, sample_image.copy(), *sample_image.size)
    return store


@pytest.fixture
def sample_image_path(tmp_path, sample_image):
    """Sample image saved to disk."""
    img_path = tmp_path / "test_image.png"
    sample_image.save(img_path)
    return str(img_path)
