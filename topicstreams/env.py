import os


def LOG_LEVEL(): return os.getenv("LOG_LEVEL", "INFO")
def DEBUG_STREAMS(): return int(os.getenv("DEBUG_STREAMS", "0"))
