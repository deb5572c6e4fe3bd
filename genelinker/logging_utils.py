# genelinker/logging_utils.py
import logging, os

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level=None) -> None:
    lvl = level or os.environ.get("GENELINKER_LOG_LEVEL", "INFO")
    root = logging.getLogger("genelinker")
    root.setLevel(lvl if isinstance(lvl, int) else str(lvl).upper())
    if not any(getattr(h, "_genelinker", False) for h in root.handlers):
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        h._genelinker = True
        root.addHandler(h)
