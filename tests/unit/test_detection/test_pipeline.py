"""
Unit tests for detection.pipeline module.
"""
import asyncio

import pytest
from core.models import Category, RawRegion
from detection.pipeline import DetectionPipeline, normalize_regions


class FakeBackend:
    """Returns fixed regions."""

    def __init__(self, regions=None, error=None):
        self.regions = regions or []
        self.error = error

    async def detect(self, image):
        if self.error:
            raise self.error
        return self.regions


class TestNormalizeRegions:
    """Tests for normalize_regions function."""

    def test_box_and_quad(self):
        regions = [
            RawRegion(label="a", coords=[0, 0, 10, 10]),
            RawRegion(label="b", coords=[0, 0, 10, 2, 12, 8, 1, 10]),
        ]

        boxes = normalize_regions(regions)

        assert boxes[0].box == (0, 0, 10, 10)
        assert boxes[1].box == (0, 0, 12, 10)
        assert all(box.category is Category.DEFAULT for box in boxes)

    def test_skips_malformed(self):
        regions = [
            RawRegion(label="bad", coords=[1, 2, 3]),
            RawRegion(label="good", coords=[0, 0, 1, 1]),
        ]

        assert [box.label for box in normalize_regions(regions)] == ["good"]


class TestDetectionPipeline:
    """Tests for DetectionPipeline."""

    def test_empty(self):
        assert DetectionPipeline().process([]) == []

    def test_process_invoice(self):
        regions = [
            RawRegion(label="Name", coords=[0, 0, 50, 20]),
            RawRegion(label="John Smith", coords=[60, 0, 160, 20]),
            RawRegion(label="john@example.com", coords=[0, 40, 150, 60]),
            RawRegion(label="Total", coords=[0, 80, 50, 100]),
            RawRegion(label="$42.00", coords=[60, 80, 120, 100]),
        ]

        boxes = DetectionPipeline().process(regions)

        assert [box.category for box in boxes] == [
            Category.DEFAULT,
            Category.NAME,
            Category.EMAIL,
            Category.DEFAULT,
            Category.PRICE,
        ]

    def test_failure_returns_empty(self):
        def broken(text):
            raise RuntimeError("boom")

        pipeline = DetectionPipeline(rules=[(broken, Category.EMAIL)])

        assert pipeline.process([RawRegion(label="x", coords=[0, 0, 1, 1])]) == []

    def test_spatial_config_override(self):
        regions = [
            RawRegion(label="Address", coords=[0, 0, 80, 20]),
            RawRegion(label="Springfield", coords=[0, 120, 100, 140]),
        ]

        default = DetectionPipeline().process(regions)
        relaxed = DetectionPipeline(spatial_config={'below_ratio': 6}).process(regions)

        assert default[1].category is Category.DEFAULT
        assert relaxed[1].category is Category.ADDRESS

    def test_process_prediction(self):
        prediction = {
            'quad_boxes': [[0, 0, 100, 0, 100, 20, 0, 20]],
            'labels': ['555-123-4567'],
        }

        boxes = DetectionPipeline().process_prediction(prediction)

        assert len(boxes) == 1
        assert boxes[0].category is Category.PHONE
        assert boxes[0].box == (0, 0, 100, 20)

    def test_process_prediction_empty(self):
        assert DetectionPipeline().process_prediction(None) == []

    def test_run(self):
        backend = FakeBackend([RawRegion(label="john@example.com", coords=[0, 0, 10, 10])])

        boxes = asyncio.run(DetectionPipeline().run(backend, image=None))

        assert boxes[0].category is Category.EMAIL

    def test_run_propagates_backend_errors(self):
        backend = FakeBackend(error=RuntimeError("server down"))

        with pytest.raises(RuntimeError, match="server down"):
            asyncio.run(DetectionPipeline().run(backend, image=None))
