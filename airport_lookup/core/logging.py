import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Root logging setup, called once from create_app()."""
    logging.basicConfig(level=level.upper(), format=_FORMAT)
    # httpx logs every request at INFO; too chatty for a per-keystroke endpoint
    logging.getLogger("httpx").setLevel(logging.WARNING)
