"""Chain domain: head-of-chain information."""

from .models import ChainHead  # noqa: F401
from .ports import ChainStateSource  # noqa: F401
