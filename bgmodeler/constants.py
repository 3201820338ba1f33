"""Constants for the motion-aware background modeler."""

DEFAULT_S_PARAM = 19  # candidates retained per region
DEFAULT_N_PARAM = 3   # divisor of min(H, W) giving the smoothing window
DEFAULT_THRESHOLD = 0  # raw difference above which a pixel counts as moving
DEFAULT_GRANULARITY = 1  # region side in pixels; 1 = pixel-level regions

OUTPUT_TEMPLATE = "output_{s}_{n}.png"
