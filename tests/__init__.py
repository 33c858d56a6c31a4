import os

from drttools import Component
from drttools.architectures import Architecture
from drttools.excuses import AgeInfo, BuiltOnBuildd, ExcusesItem, PolicyInfo
from drttools.policies import PolicyVerdict

TEST_DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')
BUILDD = 'buildd_amd64-x86-ubc-01@buildd.debian.org'
MAINTAINER = 'Some Maintainer <maintainer@example.org>'


class MockObject(object):

    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)


def new_options(**kwargs):
    options = {
        'dry_run': False,
        'ignore_age': False,
        'ignore_autopkgtests': False,
        'no_rebuilds': False,
        'no_unblocks': False,
    }
    options.update(kwargs)
    return MockObject(**options)


class FakeSourcePackages(object):

    def __init__(self, *ma_same_sources):
        self.ma_same_sources = set(ma_same_sources)

    def is_ma_same(self, source):
        return source in self.ma_same_sources


def new_excuses_item(source='foo', *, item_name=None, new_version='1.0-1', old_version='0.9-1',
                     component=Component.MAIN, invalidated_by_other_package=None, missing_builds=None,
                     migration_policy_verdict=PolicyVerdict.REJECTED_PERMANENTLY, signed_by=None,
                     builtonbuildd_verdict=PolicyVerdict.REJECTED_PERMANENTLY, age=(5, 10),
                     autopkgtest=None, extras=None, policy_info=True):
    """Build an ExcusesItem for a source that has a maintainer-built binary on amd64

    :param age: (age requirement, current age), or None for no age policy
    :param policy_info: False to build an item without any policy information
    """
    if signed_by is None:
        signed_by = {
            Architecture.AMD64: MAINTAINER,
            Architecture.ARM64: BUILDD,
            Architecture.ALL: BUILDD,
        }
    info = None
    if policy_info:
        age_info = AgeInfo(age[0], age[1], PolicyVerdict.PASS) if age is not None else None
        builtonbuildd = BuiltOnBuildd(signed_by, builtonbuildd_verdict) if builtonbuildd_verdict else None
        info = PolicyInfo(age_info, builtonbuildd, autopkgtest, extras or {})
    return ExcusesItem(
        True,
        new_version,
        old_version,
        item_name if item_name is not None else source,
        source,
        component,
        invalidated_by_other_package,
        missing_builds,
        migration_policy_verdict,
        info,
    )
