"""Filename-based diagram classification and PlantUML generation.

The classifier does not look at pixels. It guesses a diagram type from the
saved image's filename using an ordered rule table (first match wins), and
emits a templated PlantUML sketch when the guess clears the configured
confidence threshold.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..processing.models import BoundingBox, Diagram, DiagramType


logger = logging.getLogger(__name__)


_AUTO_NAME_PATTERN = re.compile(r"page_\d+_image_\d+")


def _contains(*keywords: str) -> Callable[[str], bool]:
    return lambda name: any(k in name for k in keywords)


# (predicate, type, confidence). Specific keywords come before the generic
# "diagram" so e.g. "block_diagram" resolves to BLOCK.
DIAGRAM_RULES: list[tuple[Callable[[str], bool], DiagramType, float]] = [
    (_contains("circuit", "electronic"), DiagramType.CIRCUIT, 0.8),
    (_contains("block", "schematic"), DiagramType.BLOCK, 0.8),
    (_contains("network", "topology"), DiagramType.NETWORK, 0.8),
    (_contains("flowchart"), DiagramType.FLOWCHART, 0.8),
    (_contains("diagram"), DiagramType.FLOWCHART, 0.8),
    (lambda name: bool(_AUTO_NAME_PATTERN.search(name)), DiagramType.BLOCK, 0.6),
]

FALLBACK_CLASSIFICATION = (DiagramType.UNKNOWN, 0.2)


_FLOWCHART_TEMPLATE = """\
' Flowchart detected from PDF diagram
start
:Process Input;
if (Condition?) then (yes)
  :Action A;
else (no)
  :Action B;
endif
:Generate Output;
stop

note bottom : Diagram converted from PDF image
"""

_BLOCK_TEMPLATE = """\
' Block diagram detected from PDF
!define BLOCK(x) rectangle x

BLOCK(Input) {
  [Input Signal]
}

BLOCK(Process) {
  [Processing Unit]
}

BLOCK(Output) {
  [Output Signal]
}

[Input Signal] --> [Processing Unit]
[Processing Unit] --> [Output Signal]

note bottom : Block diagram converted from PDF image
"""

_CIRCUIT_TEMPLATE = """\
' Circuit diagram detected from PDF
!define COMPONENT(x) circle x

COMPONENT(R1) {
  R1\\nResistor
}

COMPONENT(C1) {
  C1\\nCapacitor
}

rectangle VCC
rectangle GND

VCC --> R1
R1 --> C1
C1 --> GND

note bottom : Circuit diagram converted from PDF image
"""

_NETWORK_TEMPLATE = """\
' Network diagram detected from PDF
!include <C4/C4_Container>

Person(user, "User", "End user")
System(server, "Server", "Main server")
System(database, "Database", "Data storage")

Rel(user, server, "Connects to")
Rel(server, database, "Reads/Writes")

note bottom : Network diagram converted from PDF image
"""

_GENERIC_TEMPLATE = """\
' Generic diagram detected from PDF
rectangle "Component A" as A
rectangle "Component B" as B
rectangle "Component C" as C

A --> B
B --> C

note bottom : Generic diagram converted from PDF image
"""

DIAGRAM_TEMPLATES = {
    DiagramType.FLOWCHART: _FLOWCHART_TEMPLATE,
    DiagramType.BLOCK: _BLOCK_TEMPLATE,
    DiagramType.CIRCUIT: _CIRCUIT_TEMPLATE,
    DiagramType.NETWORK: _NETWORK_TEMPLATE,
}

_STYLE_DIRECTIVES = {
    "blueprint": "!theme blueprint",
    "modern": "!theme modern",
}

_COLOR_SCHEME_DIRECTIVES = {
    "mono": "skinparam monochrome true",
    "color": "skinparam monochrome false",
}


@dataclass
class DiagramClassifierConfig:
    """Configuration for diagram detection."""
    enabled: bool = False
    confidence_threshold: float = 0.7
    style: str = "default"  # default, blueprint, modern
    color_scheme: str = "auto"  # mono, color, auto


class DiagramClassifier:
    """Guesses diagram types for extracted images and renders them as PlantUML."""

    def __init__(self, config: Optional[DiagramClassifierConfig] = None):
        self.config = config or DiagramClassifierConfig()

    def classify(self, image_path: str) -> tuple[DiagramType, float]:
        """Return the (type, confidence) guess for an image filename."""
        name = Path(image_path).name.lower()
        for predicate, diagram_type, confidence in DIAGRAM_RULES:
            if predicate(name):
                return diagram_type, confidence
        return FALLBACK_CLASSIFICATION

    def detect(self, image_path: str) -> list[Diagram]:
        """Detect diagrams in a saved image.

        Args:
            image_path: Path of the image on disk.

        Returns:
            An empty list when detection is disabled or the confidence is
            below the threshold, otherwise a single Diagram.
        """
        if not self.config.enabled:
            return []

        logger.debug(f"Analyzing image for diagrams: {image_path}")
        diagram_type, confidence = self.classify(image_path)
        name = Path(image_path).name

        if confidence < self.config.confidence_threshold:
            logger.debug(
                f"No diagram detected in {name} (confidence: {confidence:.2f} "
                f"< threshold: {self.config.confidence_threshold:.2f})"
            )
            return []

        logger.info(
            f"Diagram detected in {name}: type={diagram_type.value}, confidence={confidence:.2f}"
        )
        return [
            Diagram(
                type=diagram_type,
                confidence=confidence,
                markup=self.generate_plantuml(diagram_type),
                image_path=image_path,
                bounding_box=BoundingBox(0, 0, 400, 300),
            )
        ]

    def generate_plantuml(self, diagram_type: DiagramType) -> str:
        """Build the PlantUML source for a diagram type."""
        lines = ["@startuml"]
        style = _STYLE_DIRECTIVES.get(self.config.style)
        if style:
            lines.append(style)
        scheme = _COLOR_SCHEME_DIRECTIVES.get(self.config.color_scheme)
        if scheme:
            lines.append(scheme)

        body = DIAGRAM_TEMPLATES.get(diagram_type, _GENERIC_TEMPLATE)
        return "\n".join(lines) + "\n\n" + body + "@enduml\n"

    def to_markdown(self, diagram: Diagram) -> str:
        """Format a diagram as a Markdown banner, PlantUML block and attribution."""
        title = diagram.type.value.title()
        return (
            f"### Detected {title} Diagram (Confidence: {diagram.confidence * 100:.1f}%)\n\n"
            f"```plantuml\n{diagram.markup}```\n\n"
            f"*Original image: {Path(diagram.image_path).name}*\n\n"
        )
