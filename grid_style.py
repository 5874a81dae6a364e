# Aquarium Grid Style Definitions

# Cell States
COLOR_EMPTY = (235, 235, 235)
COLOR_FLOODED = (70, 140, 220)   # Water
COLOR_INVALID = (180, 180, 180)
COLOR_INVALID_MARK = (110, 110, 110)

# Lines and Outlines
COLOR_GRID_LINES = (200, 200, 200)
COLOR_WALLS = (20, 20, 20)
COLOR_SOLVER_HIGHLIGHT = (255, 200, 0)   # Outline for cells changed by the solver
WALL_THICKNESS = 3

# Text
COLOR_TEXT_HINT = (230, 230, 230)
COLOR_TEXT_DEBUG = (90, 90, 90)  # Partition ids
COLOR_TITLE = (220, 220, 220)

# Images
COLOR_BG = (30, 30, 30)
BASE_CELL_SIZE = 32
PADDING = 20
TITLE_HEIGHT = 40
