"""
Central configuration constants for the smart city simulation.

Defines update-rule coefficients, buffer caps, fixed layouts and clock
parameters used across multiple modules.
"""

# ============================================================================
# Clock Configuration
# ============================================================================

BASE_TICK_PERIOD_S = 1.0   # Tick period at speed 1.0x
SPEED_MIN = 0.1            # Slider lower bound
SPEED_MAX = 5.0            # Slider upper bound


# ============================================================================
# Quantum Register
# ============================================================================

QUBIT_COUNT = 5
QUBIT_FLIP_THRESHOLD = 0.5  # bit = u > threshold


# ============================================================================
# DePIN Network
# ============================================================================

DEPIN_GRID_SIZE = 3                       # 3x3 grid
DEPIN_NODE_COUNT = DEPIN_GRID_SIZE * DEPIN_GRID_SIZE
DEPIN_SPACING = 5.0                       # Row and column spacing (scene units)
DEPIN_ORIGIN = (35.0, 0.0, -35.0)         # Grid origin offset
DEPIN_ACTIVITY_THRESHOLD = 0.3            # active = gate and u > threshold
DEPIN_VOLUME_GAIN = 0.1                   # Per tick while active
DEPIN_VOLUME_DECAY = 0.05                 # Per tick while inactive


# ============================================================================
# Optimization Process (annealing score)
# ============================================================================

OPTIMIZATION_STEP_MAX = 0.05  # score += u * step_max


# ============================================================================
# City Portfolio
# ============================================================================

BUILDING_COUNT = 9
EFFICIENCY_INITIAL = 0.5

BUILDING_NOISE_SCALE = 0.05     # (u - 0.5) * scale
BUILDING_SCORE_BIAS = 0.02      # score * bias
UTILITY_NOISE_SCALE = 0.02      # Infrastructure and traffic
UTILITY_SCORE_BIAS = 0.01


# ============================================================================
# Ledger Simulator
# ============================================================================

LEDGER_NODES = (
    ('Block A', (0.0, 0.0, 30.0)),
    ('Block B', (5.0, 0.0, 30.0)),
    ('Block C', (-5.0, 0.0, 30.0)),
)

# Seed edges as (from_index, to_index) into LEDGER_NODES: A->B, B->C, C->A
LEDGER_SEED_EDGES = ((0, 1), (1, 2), (2, 0))

LEDGER_EDGE_CAP = 20
LEDGER_EDGE_THRESHOLD = 0.7        # Append edge when u > threshold

TRANSACTION_CAP = 20
TRANSACTION_THRESHOLD = 0.5        # Synthesize record when u > threshold
TRANSACTION_PEER_COUNT = 10        # Labels Node_0 .. Node_9
TRANSACTION_AMOUNT_MAX = 10.0
TRANSACTION_HASH_LENGTH = 13       # Base-36 characters


# ============================================================================
# Performance History
# ============================================================================

HISTORY_CAP = 20


# ============================================================================
# Energy Flow
# ============================================================================

ENERGY_FLOW_RATE = 0.02   # phase += rate * speed (mod 1)


# ============================================================================
# Scene Layout (read by renderers)
# ============================================================================

CITY_ORIGIN = (0.0, 0.0, 50.0)
BUILDING_SPACING = 6.0
BUILDING_BASE_HEIGHT = 3.0
BUILDING_HEIGHT_SCALE = 10.0

ENERGY_FLOW_SOURCES = ((-30.0, 0.0, -30.0), (30.0, 0.0, -30.0))
ENERGY_FLOW_SINK = (0.0, 10.0, 50.0)

OPTIMIZATION_FIELD_SCALE = 60.0
OPTIMIZATION_FIELD_SEGMENTS = 30
OPTIMIZATION_FIELD_AMPLITUDE = 0.5

INFRASTRUCTURE_SPAN = 10.0
INFRASTRUCTURE_PEAK_SCALE = 5.0


# ============================================================================
# Traffic Layer
# ============================================================================

# (start_x, base_speed) per vehicle lane
VEHICLE_LANES = ((-5.0, 0.05), (0.0, 0.03), (5.0, 0.04))
VEHICLE_WRAP_X = 10.0


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100

# Default tick summary interval for the headless runner
TICK_SUMMARY_INTERVAL = 10
