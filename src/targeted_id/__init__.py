"""targeted-id: derive eduPersonTargetedID values for federated authentication.

Usage:
    from targeted_id import TargetedIDFilter

    id_filter = TargetedIDFilter({"salt": "s3cr3t"})
    id_filter.process(state)
    state["Attributes"]["eduPersonTargetedID"]
"""

__version__ = "1.0.0"

from targeted_id.filter import TargetedIDFilter

__all__ = ["TargetedIDFilter", "__version__"]
