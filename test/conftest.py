import logging

from sensai.util.logging import configure

configure(level=logging.INFO)
