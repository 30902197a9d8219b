"""
Game constants for the grid snake.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Screen coordinates: y grows downwards
DIRECTION_VECTORS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

DEFAULT_DIRECTION = LEFT

# Entity kinds
SEGMENT = "segment"
FOOD = "food"
OBSTACLE = "obstacle"
ENTITY_KINDS = {SEGMENT, FOOD, OBSTACLE}

# (stroke, fill) per kind
ENTITY_COLORS = {
    SEGMENT: ("#ffffff", "#000000"),
    FOOD: ("#00ff00", "#000000"),
    OBSTACLE: ("#6666ff", "#000099"),
}
HEAD_COLORS = ("#ff0000", "#000000")

# Reference board layout (inclusive edges)
BOUNDARY_X = (1, 58)
BOUNDARY_Y = (4, 48)
START_POSITION = (25, 25)
FOOD_COUNT = 50
OBSTACLE_COUNT = 50
DEFAULT_FPS = 5
MAX_PLACEMENT_ATTEMPTS = 10000

# Scoring
POINTS_PER_SEGMENT = 10

# Game states
RUNNING = "running"
GAME_OVER = "game_over"

# Audio events
SOUND_COLLECT = "collect"
SOUND_DEATH = "death"

GAME_OVER_MESSAGE = "Game Over"
RESTART_HINT = "Press 'r' to play again"
