from doggo_core.testing.fixtures import (
    CAR_KEYS,
    MOCK_FIXTURES,
    TEST_PASSWORD,
    FixtureSet,
    KeyFixture,
    generate_fixtures,
)
from doggo_core.testing.suite import (
    AdapterTestSuite,
    ConformanceFailure,
    ScenarioResult,
    SuiteReport,
    inline_material,
)

__all__ = [
    "CAR_KEYS",
    "MOCK_FIXTURES",
    "TEST_PASSWORD",
    "FixtureSet",
    "KeyFixture",
    "generate_fixtures",
    "AdapterTestSuite",
    "ConformanceFailure",
    "ScenarioResult",
    "SuiteReport",
    "inline_material",
]
