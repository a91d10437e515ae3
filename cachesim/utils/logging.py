import logging

ROOT_LOGGER = "cachesim"

def get_logger(name: str = ROOT_LOGGER):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    return logging.getLogger(name)

def set_log_level(level):
    """Sets the level shared by every cachesim.* logger."""
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger(ROOT_LOGGER).setLevel(level)
