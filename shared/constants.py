"""
Critters - Shared Constants
Constants used by the engine, the creatures and the game world.
"""

# Timing
TICK_MS = 16  # Host frame interval (~60Hz)

# Event log
EVENT_LOG_CAPACITY = 50  # Ring buffer slots; slow consumers miss older events

# Movement
STEP_DISTANCE = 1.0  # World units covered by one full hop
ROTATION_MS = 200  # Turn to face the target before moving
HOP_MS = 1000  # Duration of one hop segment
HOP_PAUSE_MS = 500  # Rest between hops
HOP_HEIGHT = 1.0  # Peak of the vertical arc at mid-hop
WANDER_RADIUS = 1.0  # Max distance of a random wander target

# State timers (seconds, [min, max])
EGG_SECONDS = (5.0, 10.0)
IDLE_SECONDS = (1.0, 2.0)
HUNGRY_SECONDS = (1.0, 2.0)
FRUIT_RESPAWN_SECONDS = (30.0, 60.0)

# Hunger (0 is full)
MAX_HUNGER = 100.0
HUNGER_PER_SECOND = 0.5  # How fast the meter fills
FOOD_VALUE = 10.0  # Hunger removed by eating one piece of food

# Environment
BOUNDS_MIN = (-10.0, -10.0)  # x, z
BOUNDS_MAX = (10.0, 10.0)  # x, z
REVEAL_RADIUS = 1.0  # Tiles within this distance of a point/path are revealed

# Blackboard keys
LAST_BELL = "last_bell"  # position of the most recent bell
HUNGRY = "hungry"  # position of food the creature noticed
MOVE_TARGET = "move_target"  # explicit destination for the move state
SHAKEN = "shaken"  # identifier of whoever shook a fruit tree

# Presentation objects and cues
EGG_VISUAL = "egg"
EGG_SHELL_VISUAL = "egg_shell"
EMOTE_VISUAL = "emote"
HUNGRY_ICON = "hungry_icon"
EXCLAMATION_ICON = "exclamation_icon"
QUESTION_MARK_ICON = "question_mark_icon"
HATCH_CUE = "hatch"
BELL_HEARD_CUE = "bell_heard"
FRUIT_DROP_CUE = "fruit_drop"
FRUIT_GROW_CUE = "fruit_grow"
EAT_CUE = "eat"
DEFAULT_CREATURE_VISUALS = ("blob_green", "blob_pink", "blob_blue")
