"""Heuristic thresholds for shape classification and face tracking.

All distances are in frame pixels, areas in squared pixels.
"""

# Rows either side of the narrowest span searched for a slanted waist.
SLANT_WINDOW_ROWS = 13

# Candidate waists within this many pixels of the shortest one compete on skew.
SLANT_DISTANCE_TOLERANCE = 1.0

# Bounding box width and height may differ by this much and still be "round".
CIRCULARITY_TOLERANCE = 4

# Shapes hanging from row 0 shorter than this are ceiling heat, not bodies.
CEILING_HEAT_MIN_ROWS = 80

# A row narrower than start_width / CRACK_RATIO counts as part of a crack.
CRACK_RATIO = 2

# Lower-half rows may change width by this much before being clamped out.
NARROWING_TOLERANCE = 1

# Face stability: area delta and per-corner movement allowed between frames.
FACE_AREA_TOLERANCE = 150
FACE_MOVEMENT_TOLERANCE = 10
