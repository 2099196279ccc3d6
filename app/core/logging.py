from __future__ import annotations

"""Shared loggers.

``logger`` writes through ``uvicorn.error`` so messages appear in the server
output. Seeding runs log through its ``seeding`` child, which lets
operators raise or silence the per-place run log separately.
"""

import logging

logger = logging.getLogger("uvicorn.error")
seed_logger = logger.getChild("seeding")
