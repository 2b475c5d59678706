"""
Rule-based hints, always available as the fallback when AI is skipped or fails.
"""

VISUAL_HINTS = (
    (("area", "perimeter"), "Try drawing the shape on paper and labeling each side. Then count or measure each piece."),
    (("angle",), "Imagine opening a door. The wider the opening, the bigger the angle. Can you picture that with this problem?"),
    (("triangle",), "Draw the triangle and mark each corner. Count how many corners (angles) you have."),
)

REAL_WORLD_HINTS = (
    (("perimeter",), "Think about walking around a playground. Perimeter is like counting your steps all the way around."),
    (("area",), "Imagine covering a table with square tiles. Area is how many tiles you need."),
    (("volume",), "Picture filling a box with small cubes. Volume is how many cubes fit inside."),
)

TEXT_HINTS = {
    "perimeter": "Perimeter means the distance around the outside. Add up all the side lengths.",
    "area": "Area is the space inside the shape. For rectangles: multiply length × width.",
    "volume": "Volume is the space inside a 3D shape. For boxes: length × width × height.",
    "angle": "Angles are measured in degrees. A right angle is 90°, straight line is 180°.",
    "triangle": "Remember: All triangles have 3 sides and 3 angles that add up to 180°.",
    "circle": "For circles, remember: diameter goes all the way across, radius is half of that.",
    "polygon": "Count the sides and angles. The number of sides = number of angles.",
    "line": "Lines go on forever in both directions. Line segments have endpoints.",
}


def get_rule_based_hint(topic: str, representation_type: str = "text") -> str:
    """Pick a hint by representation first, then by topic keyword."""
    topic_lower = (topic or "").lower()

    representation_hints = {
        "visual": VISUAL_HINTS,
        "real_world": REAL_WORLD_HINTS,
    }.get(representation_type, ())

    for keywords, hint in representation_hints:
        if any(keyword in topic_lower for keyword in keywords):
            return hint

    for keyword, hint in TEXT_HINTS.items():
        if keyword in topic_lower:
            return hint

    return f"Think about what the question is asking. What formula or concept from {topic} might help?"
