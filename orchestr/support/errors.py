"""
Support fault types.
"""

from ..faults import Fault, FaultDomain


class FacadeRootUnavailableError(Fault):
    """Raised when a facade is used before an application is set."""

    code = "FACADE_ROOT_UNAVAILABLE"
    domain = FaultDomain.SUPPORT

    def __init__(self, facade: str):
        super().__init__(
            message=f"A facade root has not been set (facade {facade}).",
            metadata={"facade": facade},
        )
