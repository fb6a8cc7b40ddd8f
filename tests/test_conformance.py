import pytest

from doggo_core import Doggo
from doggo_core.adapters import MockAdapter, NativeAdapter
from doggo_core.errors import InvalidAdapterError
from doggo_core.keystore import SQLiteKeystore
from doggo_core.testing import (
    MOCK_FIXTURES, AdapterTestSuite, ConformanceFailure, generate_fixtures,
)

SCENARIOS = AdapterTestSuite.scenario_names()


@pytest.fixture(scope="module")
def native_fixtures():
    return generate_fixtures(Doggo(NativeAdapter()))


@pytest.mark.parametrize("scenario", SCENARIOS)
def test_mock_adapter_conforms(scenario):
    AdapterTestSuite(MockAdapter(), MOCK_FIXTURES).run_scenario(scenario)


@pytest.mark.parametrize("scenario", SCENARIOS)
def test_native_adapter_conforms(scenario, native_fixtures):
    AdapterTestSuite(NativeAdapter(), native_fixtures).run_scenario(scenario)


def test_native_adapter_on_sqlite_conforms(tmp_path, native_fixtures):
    store = SQLiteKeystore(str(tmp_path / "keys.db"))
    report = AdapterTestSuite(NativeAdapter(store), native_fixtures).run()
    assert report.conformant, report.failures
    # every scenario cleaned up after itself
    assert store.list() == []


def test_one_instance_runs_every_scenario():
    report = AdapterTestSuite(MockAdapter(), MOCK_FIXTURES).run()
    assert report.adapter == "mock"
    assert [r.name for r in report.results] == SCENARIOS
    assert report.conformant, report.failures


def test_fixtures_generated_by_the_mock():
    doggo = Doggo(MockAdapter())
    fixtures = generate_fixtures(doggo)
    assert len(set(fixtures.pub_sec.cipher_texts)) == 2
    assert doggo.list_keys() == []
    assert AdapterTestSuite(doggo.adapter, fixtures).run().conformant


def test_scenario_registry():
    assert len(SCENARIOS) == len(set(SCENARIOS))
    for name in ("imports valid keys", "encrypts non-deterministically", "deletes keys idempotently"):
        assert name in SCENARIOS
    with pytest.raises(ValueError):
        AdapterTestSuite(MockAdapter(), MOCK_FIXTURES).run_scenario("fetches the ball")


def test_suite_validates_its_inputs():
    with pytest.raises(InvalidAdapterError, match="Invalid adapter passed"):
        AdapterTestSuite(None, MOCK_FIXTURES)
    with pytest.raises(TypeError, match="Invalid fixtures passed"):
        AdapterTestSuite(MockAdapter(), {"pub_sec": None})


# ----------------------------------------------------------------------
# Broken backends must be caught
# ----------------------------------------------------------------------
class DeterministicMock(MockAdapter):
    name = "deterministic"

    def encrypt(self, request):
        cipher_text = super().encrypt(request)
        self._pool_cursor.clear()
        return cipher_text


class IgnoresTypeFilter(MockAdapter):
    name = "no-type-filter"

    def list_keys(self, request):
        request.type = "all"
        return super().list_keys(request)


class GrumpyDelete(MockAdapter):
    name = "grumpy-delete"

    def delete_key(self, request):
        if request.fingerprint.upper() not in self.imported:
            return False
        return super().delete_key(request)


class LeakyExport(MockAdapter):
    name = "leaky-export"

    def export_keys(self, request):
        exported = super().export_keys(request)
        if exported.sec is None:
            exported.sec = ""
        return exported


@pytest.mark.parametrize("adapter,scenario", [
    (DeterministicMock(), "encrypts non-deterministically"),
    (IgnoresTypeFilter(), "lists keys by type"),
    (GrumpyDelete(), "deletes keys idempotently"),
    (LeakyExport(), "exports null for absent halves"),
])
def test_suite_catches_broken_adapters(adapter, scenario):
    suite = AdapterTestSuite(adapter, MOCK_FIXTURES)
    with pytest.raises(AssertionError):
        suite.run_scenario(scenario)

    report = suite.run()
    assert not report.conformant
    assert scenario in [r.name for r in report.failures]


def test_conformance_failure_is_an_assertion_error():
    assert issubclass(ConformanceFailure, AssertionError)
