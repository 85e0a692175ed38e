"""Default simulation constants."""

# Time step used by nodes that never had one assigned (seconds)
DEFAULT_DT = 0.01

# Start time of a freshly built scene (seconds)
DEFAULT_START_TIME = 0.0

# Template assumed when a description does not name one
DEFAULT_TEMPLATE = "Vec3d"

# Environment variables understood by SimulationConfig.from_env()
ENV_LOG_LEVEL = "SIMGRAPH_LOG_LEVEL"
ENV_DEFAULT_DT = "SIMGRAPH_DEFAULT_DT"
ENV_TRACE_MODE = "SIMGRAPH_TRACE"
ENV_TIMER_ENABLED = "SIMGRAPH_TIMER"

# HTTP driver
DEFAULT_API_PORT = 8000
