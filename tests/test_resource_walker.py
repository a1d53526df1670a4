from unittest.mock import MagicMock

from PIL import Image

from datasheet_to_md.post_processing.diagram_classifier import (
    DiagramClassifier,
    DiagramClassifierConfig,
)
from datasheet_to_md.processing.models import DiagramType, ImageResource
from datasheet_to_md.processing.resource_walker import ResourceWalker, image_filename


def _gray_resource(xref, name=""):
    return ImageResource(
        data=bytes(range(4)), width=2, height=2,
        color_space="DeviceGray", bits_per_component=8, xref=xref, name=name,
    )


def _mock_document(entries, broken=(), non_images=()):
    document = MagicMock()
    document.image_resources.return_value = entries
    document.is_image.side_effect = lambda xref: xref not in non_images

    def load(xref, name=""):
        if xref in broken:
            raise RuntimeError(f"corrupt stream {xref}")
        return _gray_resource(xref, name)

    document.load_image_resource.side_effect = load
    return document


def test_image_filename_pattern():
    assert image_filename(3, 2) == "page_3_image_2.png"


def test_unreadable_stream_becomes_placeholder(tmp_path):
    document = _mock_document([("Im1", 10), ("Im2", 11), ("Im3", 12)], broken={11})

    outcomes = ResourceWalker().walk_page(document, 1, tmp_path)

    assert [o.filename for o in outcomes] == [
        "page_1_image_1.png", "page_1_image_2.png", "page_1_image_3.png",
    ]
    assert all(o.ok for o in outcomes)
    placeholder = outcomes[1].image
    assert (placeholder.width, placeholder.height) == (200, 150)
    with Image.open(tmp_path / "page_1_image_2.png") as saved:
        assert saved.size == (200, 150)
        assert saved.convert("RGBA").getpixel((0, 0)) == (240, 240, 240, 255)


def test_unreadable_stream_is_still_classified(tmp_path):
    document = _mock_document([("Im1", 10)], broken={10})
    classifier = MagicMock()
    classifier.detect.return_value = []

    outcome = ResourceWalker(classifier).walk_page(document, 1, tmp_path)[0]

    assert outcome.ok
    classifier.detect.assert_called_once_with(str(tmp_path / "page_1_image_1.png"))


def test_failing_save_does_not_stop_the_page(tmp_path):
    document = _mock_document([("Im1", 10), ("Im2", 11), ("Im3", 12)])
    # a directory in the way makes the second save fail
    (tmp_path / "page_1_image_2.png").mkdir()

    outcomes = ResourceWalker().walk_page(document, 1, tmp_path)

    assert [o.ok for o in outcomes] == [True, False, True]
    assert outcomes[1].filename == "page_1_image_2.png"
    assert outcomes[1].error
    assert (tmp_path / "page_1_image_1.png").is_file()
    assert (tmp_path / "page_1_image_3.png").is_file()


def test_saved_images_are_png_and_buffers_released(tmp_path):
    document = _mock_document([("Im1", 10)])

    outcome = ResourceWalker().walk_page(document, 2, tmp_path)[0]

    assert outcome.image.bitmap is None
    assert (outcome.image.width, outcome.image.height) == (2, 2)
    with Image.open(tmp_path / "page_2_image_1.png") as saved:
        assert saved.format == "PNG"
        assert saved.convert("RGBA").getpixel((1, 1)) == (3, 3, 3, 255)


def test_non_image_resources_are_skipped_without_using_an_index(tmp_path):
    document = _mock_document([("Fm0", 5), ("Im1", 6)], non_images={5})

    outcomes = ResourceWalker().walk_page(document, 4, tmp_path)

    assert [o.filename for o in outcomes] == ["page_4_image_1.png"]
    document.load_image_resource.assert_called_once_with(6, "Im1")


def test_page_without_resources_yields_nothing(tmp_path):
    document = _mock_document([])
    assert ResourceWalker().walk_page(document, 1, tmp_path) == []


def test_resource_listing_failure_is_contained(tmp_path):
    document = MagicMock()
    document.image_resources.side_effect = RuntimeError("bad resources")
    assert ResourceWalker().walk_page(document, 1, tmp_path) == []


def test_classifier_failure_is_contained(tmp_path):
    document = _mock_document([("Im1", 10), ("Im2", 11)])
    classifier = MagicMock()
    classifier.detect.side_effect = [RuntimeError("boom"), []]

    outcomes = ResourceWalker(classifier).walk_page(document, 1, tmp_path)

    assert [o.ok for o in outcomes] == [False, True]


def test_diagrams_attached_to_images(tmp_path):
    document = _mock_document([("Im1", 10)])
    classifier = DiagramClassifier(DiagramClassifierConfig(enabled=True, confidence_threshold=0.5))

    outcome = ResourceWalker(classifier).walk_page(document, 1, tmp_path)[0]

    assert [d.type for d in outcome.image.diagrams] == [DiagramType.BLOCK]
    assert outcome.image.diagrams[0].image_path == str(tmp_path / "page_1_image_1.png")
