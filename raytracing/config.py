"""
Numerical constants and explorer defaults
=========================================
Central registry for the tolerances used by the ray tracer and for the
default values shown by the Streamlit explorer.

Exports:
    GRADIENT_TOLERANCE (float): Layers with ``|gradient|`` at or below this
        value (1/s) are treated as homogeneous.
    NUMBER_SEGMENTS (int): Dense plot samples taken along each circular arc.
    RAY_PARAMETER_TOLERANCE (float): Ray parameters (s/m) at or below this
        value are traced as vertical rays.
    HORIZONTAL_RAY_TIME_FACTOR (float): Multiple of the remaining time given
        to a horizontal ray crossing a homogeneous layer.
    TRAPPED_RAY_TIME_TOLERANCE (float): A turn that returns a ray to the node
        it started on in less than this time (s) holds the ray on the node
        when the velocity there is a local minimum.
"""

GRADIENT_TOLERANCE: float = 0.00001
NUMBER_SEGMENTS: int = 5
RAY_PARAMETER_TOLERANCE: float = 1e-12
HORIZONTAL_RAY_TIME_FACTOR: float = 100.0
TRAPPED_RAY_TIME_TOLERANCE: float = 1e-5

# Explorer defaults
DEFAULT_PROFILE_KIND: str = "thermocline"
DEFAULT_SOURCE_DEPTH: float = 5.0
DEFAULT_BEAMS: int = 21
DEFAULT_SWATH_ANGLE: float = 130.0
DEFAULT_TWO_WAY_TIME: float = 2.0
DEFAULT_PLOT_CAPACITY: int = 400
