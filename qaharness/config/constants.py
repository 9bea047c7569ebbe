"""
Configuration-related constants and resource limits.
"""

# Environment selector and its fallback
ENV_SELECTOR_VAR = "APP_ENV"
DEFAULT_ENV_NAME = "T5"

# Overrides the config root directory lookup
CONFIG_DIR_VAR = "QAHARNESS_CONFIG_DIR"

# Relative location of the config root, searched upward from the working directory
DEFAULT_CONFIG_SUBDIR = ("etc", "env")

# Lookup order for <group>/<name>.<ext>
CONFIG_EXTENSIONS = ("json", "yaml", "yml")

# Environment files are small; anything bigger is a mistake
MAX_CONFIG_SIZE_BYTES = 1024 * 1024
