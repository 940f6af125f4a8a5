"""
flowgraph.config.defaults - Default configuration values
"""

CONFIG_FILENAME = ".flowgraph.toml"

ENV_PREFIX = "FLOWGRAPH_"

DEFAULT_CONFIG = {
    "editor": {
        # Offset applied to duplicated nodes
        "duplicate_offset": [40, 40],
        "allow_self_loops": False,
        "id_length": 8,
    },
    "history": {
        # 0 keeps every undo step
        "max_depth": 0,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 5001,
    },
}
