# Importing the models registers every table on Base.metadata.
from loca.models import Base, domain  # noqa: F401

__all__ = ["Base"]
