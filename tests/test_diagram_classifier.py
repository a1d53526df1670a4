import pytest

from datasheet_to_md.post_processing.diagram_classifier import (
    DiagramClassifier,
    DiagramClassifierConfig,
)
from datasheet_to_md.processing.models import DiagramType


@pytest.fixture
def classifier():
    return DiagramClassifier(DiagramClassifierConfig(enabled=True, confidence_threshold=0.7))


@pytest.mark.parametrize("filename, expected_type, expected_confidence", [
    ("circuit_board.png", DiagramType.CIRCUIT, 0.8),
    ("Electronic_Layout.PNG", DiagramType.CIRCUIT, 0.8),
    ("block_diagram.png", DiagramType.BLOCK, 0.8),
    ("schematic.png", DiagramType.BLOCK, 0.8),
    ("network_map.png", DiagramType.NETWORK, 0.8),
    ("bus_topology.png", DiagramType.NETWORK, 0.8),
    ("flowchart_boot.png", DiagramType.FLOWCHART, 0.8),
    ("timing_diagram.png", DiagramType.FLOWCHART, 0.8),
    ("page_1_image_1.png", DiagramType.BLOCK, 0.6),
    ("page_12_image_3_circuit.png", DiagramType.CIRCUIT, 0.8),
    ("random_photo.jpg", DiagramType.UNKNOWN, 0.2),
])
def test_classification_rules(classifier, filename, expected_type, expected_confidence):
    diagram_type, confidence = classifier.classify(f"/tmp/out/{filename}")
    assert diagram_type == expected_type
    assert confidence == expected_confidence


def test_confident_guess_is_emitted(classifier):
    diagrams = classifier.detect("/tmp/out/circuit_board.png")
    assert len(diagrams) == 1
    diagram = diagrams[0]
    assert diagram.type == DiagramType.CIRCUIT
    assert diagram.confidence == 0.8
    assert diagram.image_path == "/tmp/out/circuit_board.png"
    assert diagram.markup.startswith("@startuml\n")
    assert diagram.markup.endswith("@enduml\n")
    assert "Circuit diagram detected from PDF" in diagram.markup


def test_below_threshold_emits_nothing(classifier):
    assert classifier.detect("random_photo.jpg") == []
    assert classifier.detect("page_1_image_1.png") == []


def test_lower_threshold_accepts_auto_named_images():
    classifier = DiagramClassifier(DiagramClassifierConfig(enabled=True, confidence_threshold=0.6))
    diagrams = classifier.detect("page_1_image_1.png")
    assert [d.type for d in diagrams] == [DiagramType.BLOCK]


def test_disabled_detection_is_a_no_op():
    classifier = DiagramClassifier(DiagramClassifierConfig(enabled=False, confidence_threshold=0.0))
    assert classifier.detect("circuit_board.png") == []


def test_style_and_color_directives():
    classifier = DiagramClassifier(
        DiagramClassifierConfig(enabled=True, style="blueprint", color_scheme="mono")
    )
    markup = classifier.generate_plantuml(DiagramType.NETWORK)
    assert markup.startswith("@startuml\n!theme blueprint\nskinparam monochrome true\n\n")
    assert "!include <C4/C4_Container>" in markup


def test_default_style_adds_no_directives():
    markup = DiagramClassifier().generate_plantuml(DiagramType.FLOWCHART)
    assert markup.startswith("@startuml\n\n' Flowchart detected from PDF diagram\n")


def test_unlisted_types_use_generic_template():
    markup = DiagramClassifier().generate_plantuml(DiagramType.SEQUENCE)
    assert "Generic diagram detected from PDF" in markup


def test_markdown_rendering(classifier):
    diagram = classifier.detect("/tmp/out/block_diagram.png")[0]
    md = classifier.to_markdown(diagram)
    assert md.startswith("### Detected Block Diagram (Confidence: 80.0%)\n\n```plantuml\n@startuml")
    assert "@enduml\n```\n\n" in md
    assert md.endswith("*Original image: block_diagram.png*\n\n")
