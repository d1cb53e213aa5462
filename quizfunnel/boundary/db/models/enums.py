"""
Enum types shared across ORM models.

Dependencies: enum (stdlib)
System role: Lifecycle vocabularies for attempts, jobs, and products
"""

import enum


class ProductTag(str, enum.Enum):
    """
    Report tier an order, job, prompt, or report refers to.

    MINI_REPORT: Short web report sold right after the teaser
    FULL_ASSESSMENT: Deep assessment sold as the upsell
    """

    MINI_REPORT = "mini_report"
    FULL_ASSESSMENT = "full_assessment"


class AttemptStatus(str, enum.Enum):
    """
    Quiz attempt payment lifecycle. Only ever moves forward.

    TEASER_SHOWN: Attempt scored, teaser displayed, nothing paid
    MINI_PAID: Mini report payment confirmed
    FULL_PAID: Full assessment payment confirmed
    """

    TEASER_SHOWN = "teaser_shown"
    MINI_PAID = "mini_paid"
    FULL_PAID = "full_paid"

    @property
    def rank(self) -> int:
        """Position in the lifecycle; higher is further along."""
        return _ATTEMPT_STATUS_ORDER.index(self)

    @classmethod
    def for_product(cls, product: ProductTag) -> "AttemptStatus":
        """Status reached when a payment for ``product`` is confirmed."""
        if product == ProductTag.FULL_ASSESSMENT:
            return cls.FULL_PAID
        return cls.MINI_PAID

    def statuses_below(self) -> list["AttemptStatus"]:
        """Every status that ranks strictly lower than this one."""
        return list(_ATTEMPT_STATUS_ORDER[: self.rank])


_ATTEMPT_STATUS_ORDER = (
    AttemptStatus.TEASER_SHOWN,
    AttemptStatus.MINI_PAID,
    AttemptStatus.FULL_PAID,
)


class JobStatus(str, enum.Enum):
    """
    Report job execution states.

    PENDING: Enqueued, awaiting a worker claim
    PROCESSING: Claimed by the worker; external calls in flight
    DONE: Report row written (terminal)
    ERROR: Failed; see the error column (terminal, never retried automatically)
    """

    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        """True once the job can no longer change."""
        return self in (JobStatus.DONE, JobStatus.ERROR)
