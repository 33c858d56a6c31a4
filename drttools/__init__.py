from enum import Enum, unique


class ParseError(ValueError):
    """Base class of all errors raised while parsing archive data"""
    pass


class InvalidComponentError(ParseError):
    pass


class InvalidMultiArchError(ParseError):
    pass


@unique
class Component(Enum):

    MAIN = 'main'
    CONTRIB = 'contrib'
    NON_FREE = 'non-free'
    NON_FREE_FIRMWARE = 'non-free-firmware'

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise InvalidComponentError("invalid component: %s" % value) from None


@unique
class MultiArch(Enum):

    ALLOWED = 'allowed'
    FOREIGN = 'foreign'
    NO = 'no'
    SAME = 'same'

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise InvalidMultiArchError("invalid multi-arch: %s" % value) from None
