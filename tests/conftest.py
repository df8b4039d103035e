from __future__ import annotations

from typing import Any, Dict

import pytest

from tests._fixtures.design_builder import DesignBuilder, frame, node, solid, text


@pytest.fixture
def design_builder() -> DesignBuilder:
    """Provide an empty design builder."""
    return DesignBuilder()


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """A small but complete design file: styles, auto-layout, components and prototypes."""
    builder = DesignBuilder()
    builder.declare("S:primary", "FILL", "Primary/500", fills=[solid(0, 0.4, 1)])
    builder.declare("S:gray", "FILL", "Gray 100", fills=[solid(0.95, 0.95, 0.95)])
    builder.declare(
        "S:h1",
        "TEXT",
        "Heading 1",
        style={"fontFamily": "Inter", "fontSize": 32, "fontWeight": 700},
    )
    builder.declare(
        "S:shadow",
        "EFFECT",
        "Elevation 1",
        effects=[
            {
                "type": "DROP_SHADOW",
                "visible": True,
                "radius": 4,
                "offset": {"x": 0, "y": 2},
                "color": {"r": 0, "g": 0, "b": 0, "a": 0.25},
            }
        ],
    )
    builder.add(
        frame(
            "1:1",
            "Login Screen",
            [
                text("1:2", "Inter", 32, 700),
                text("1:3", "Inter", 14),
                node("1:4", "RECTANGLE", "Email Input", fills=[solid(1, 1, 1)], strokes=[solid(0.95, 0.95, 0.95)]),
                node(
                    "1:5",
                    "INSTANCE",
                    "Button",
                    componentId="2:1",
                    fills=[solid(0, 0.4, 1)],
                    reactions=[
                        {
                            "trigger": {"type": "ON_CLICK"},
                            "action": {
                                "type": "NODE",
                                "destinationId": "3:1",
                                "navigation": "NAVIGATE",
                                "transition": {"type": "DISSOLVE", "duration": 0.3},
                            },
                        }
                    ],
                ),
            ],
            layoutMode="VERTICAL",
            itemSpacing=16,
            paddingLeft=24,
            paddingRight=24,
            paddingTop=32,
            paddingBottom=32,
            fills=[solid(1, 1, 1)],
            absoluteBoundingBox={"x": 0, "y": 0, "width": 375, "height": 812},
        ),
        node("2:1", "COMPONENT", "Button", [node("2:2", "TEXT", "Label")], fills=[solid(0, 0.4, 1)]),
        frame(
            "3:1",
            "Header Nav",
            [node("3:2", "RECTANGLE", "Logo", fills=[solid(0.1, 0.1, 0.1)])],
            absoluteBoundingBox={"x": 500, "y": 0, "width": 1440, "height": 900},
        ),
    )
    return builder.payload()
