from kvshortener.utils import initialize_logging


initialize_logging()
