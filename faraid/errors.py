# faraid/errors.py


class FaraidError(Exception):
    """Base error for the share engine."""


class AllocationConsistencyError(FaraidError):
    """Final parts do not reconcile with the base number. Always a logic defect."""

    def __init__(self, total_parts, base_number):
        self.total_parts = total_parts
        self.base_number = base_number
        super().__init__(
            f"total parts {total_parts} do not reconcile with base number {base_number}"
        )
