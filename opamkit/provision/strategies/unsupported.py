"""
Handler for platforms without an acquisition strategy.
"""

import logging

from opamkit.core.exceptions import UnsupportedPlatformError
from opamkit.provision.strategy import (
    AcquisitionStrategy,
    ProvisionOutcome,
    ProvisionRequest,
    ProvisionResult,
)

logger = logging.getLogger(__name__)


class UnsupportedStrategy(AcquisitionStrategy):
    """Performs no action and reports the platform as unsupported."""

    name = "unsupported"

    def acquire(self, request: ProvisionRequest) -> ProvisionResult:
        error = UnsupportedPlatformError(self.context.platform)
        logger.warning(f"{error}, nothing was provisioned")
        result = self._result(ProvisionOutcome.UNSUPPORTED)
        result.error = error
        return result
