DEBUG_EXECUTION = False
DEBUG_DETAILED = False

# Blob-style rank limits. The copy loops address tensors through the
# (num, channels, height, width) accessors, which only exist up to 4 axes.
MAX_TENSOR_AXES = 32
LEGACY_AXES = 4

# Forward/Backward only know how to offset along batch or channel.
SUPPORTED_COPY_AXES = (0, 1)

# Used when a config carries neither `axis` nor `concat_dim`
DEFAULT_CONCAT_AXIS = 1

# Kernel verification tolerances
VERIFY_RTOL = 1e-6
VERIFY_ATOL = 0.0
