import copy
import io

import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import quotation_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


BASE_RECORD = {
    "companyName": "Shree Coatings",
    "companyAddress": "Plot 12, GIDC Estate, Vapi, Gujarat 396195",
    "companyEmail": "works@shreecoatings.example",
    "companyPhone": "98250 12345",
    "customerName": "Acme Fabricators Pvt. Ltd.",
    "customerAddress": "Unit 4, Industrial Area\nSilvassa 396230",
    "kindAttention": "Mr. R. Patel",
    "quoteName": "Q-1001",
    "quoteDate": "2024-03-15",
    "subject": "Quotation for sand blasting and epoxy painting",
    "lineItems": [
        {
            "description": "Sand blasting of MS structure",
            "quantity": 5,
            "unit": "sqm",
            "rate": 100,
            "showQuantity": True,
            "showUnit": True,
            "showRate": True,
        },
    ],
    "terms": "1. GST extra at 18%.\n2. Payment 50% advance.",
    "authorisedSignatory": "K. Mehta",
}


# Common test fixtures
@pytest.fixture
def record_factory():
    """Factory for valid raw quotation records with overrides."""
    def _create(**overrides) -> dict:
        record = copy.deepcopy(BASE_RECORD)
        record.update(overrides)
        return record
    return _create


@pytest.fixture
def valid_record(record_factory) -> dict:
    """A valid single-item quotation record."""
    return record_factory()


@pytest.fixture
def quotation(valid_record):
    """Validated Quotation built from valid_record."""
    from quotation_toolkit.core.schemas import ensure_valid
    return ensure_valid(valid_record)


@pytest.fixture
def png_bytes() -> bytes:
    """Small PNG image as bytes."""
    img = Image.new("RGB", (800, 70), color="navy")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
