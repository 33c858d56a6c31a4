from enum import Enum, unique

from drttools import ParseError


class InvalidVerdictError(ParseError):
    pass


@unique
class PolicyVerdict(Enum):
    """Verdict of a britney policy, as reported in excuses.yaml

    The values mirror britney's own ordering: the higher the value, the
    worse the verdict.
    """

    NOT_APPLICABLE = 0
    PASS = 1
    # the policy was overruled by a hint
    PASS_HINTED = 2
    # e.g. too young or waiting for test results
    REJECTED_TEMPORARILY = 3
    REJECTED_WAITING_FOR_ANOTHER_ITEM = 4
    REJECTED_BLOCKED_BY_ANOTHER_ITEM = 5
    # block hints, freezes and uploads to (testing-)proposed-updates
    REJECTED_NEEDS_APPROVAL = 6
    # e.g. missing builds
    REJECTED_CANNOT_DETERMINE_IF_PERMANENT = 7
    REJECTED_PERMANENTLY = 8

    def __str__(self):
        return self.name

    @classmethod
    def parse(cls, value):
        try:
            return cls[value]
        except (KeyError, TypeError):
            raise InvalidVerdictError("invalid verdict: %s" % (value,)) from None
