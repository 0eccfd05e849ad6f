import hashlib
import json
import threading
from datetime import datetime, timedelta, timezone

import pytest

from fleet_print_service.adapters import MockAdapter
from fleet_print_service.errors import PrinterNotFoundError, TransportError, ValidationError
from fleet_print_service.models import CacheEntry, Printer
from fleet_print_service.service import PrintersService, generate_printer_id
from fleet_print_service.store import MemoryStore
from tests.conftest import PDF_BASE64

T0 = datetime(2026, 10, 19, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start=T0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


class BlockingAdapter(MockAdapter):
    """Mock adapter whose discovery can be held open from the test."""

    def __init__(self, printers=None):
        super().__init__(printers)
        self.block = False
        self.started = threading.Event()
        self.release = threading.Event()

    def list_printers(self):
        printers = super().list_printers()
        if self.block:
            self.started.set()
            self.release.wait(5)
        return printers


class FlakyAdapter(MockAdapter):
    """Succeeds once, then discovery fails."""

    def list_printers(self):
        printers = super().list_printers()
        if self.call_count("list_printers") > 1:
            raise TransportError("rpcclient enumprinters failed: NT_STATUS_IO_TIMEOUT", exit_code=1)
        return printers


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def adapter():
    return BlockingAdapter()


@pytest.fixture
def service(adapter, store, config, clock):
    return PrintersService(adapter, store, config, clock=clock)


# =============================================================================
# Printer ids
# =============================================================================

def test_printer_id_is_truncated_sha256_of_normalized_name():
    expected = hashlib.sha256(b"hp-1").hexdigest()[:16]

    assert generate_printer_id("HP-1") == expected
    assert generate_printer_id("  hp-1 ") == expected
    assert len(expected) == 16


def test_printer_ids_differ_for_different_names():
    assert generate_printer_id("HP-1") != generate_printer_id("HP-2")


def test_listed_printer_has_stable_id(store, config, clock):
    adapter = MockAdapter([Printer(name="HP-1", uri="smb://PRINTSRV01/HP-1")])
    service = PrintersService(adapter, store, config, clock=clock)

    printer = service.list()[0]

    assert printer.id == hashlib.sha256(b"hp-1").hexdigest()[:16]
    assert printer.name == "HP-1"
    assert printer.uri == "smb://PRINTSRV01/HP-1"
    assert printer.cached_at == T0


# =============================================================================
# Cache reads
# =============================================================================

def test_empty_store_fetches_synchronously_and_stores(service, adapter, store, config):
    printers = service.list()

    assert [p.name for p in printers] == ["Mock Printer 1", "Mock Printer 2"]
    assert adapter.call_count("list_printers") == 1

    entry = CacheEntry.from_json(store.get(config.cache_key))
    assert entry.last_updated == T0
    assert [p.id for p in entry.printers] == [p.id for p in printers]


def test_fresh_entry_is_served_without_discovery(service, adapter, clock):
    service.list()
    clock.advance(299)

    service.list()

    assert adapter.call_count("list_printers") == 1
    assert not service.cache_info()["refreshing"]


def test_stale_entry_is_returned_immediately_with_one_background_refresh(service, adapter, clock):
    service.list()
    clock.advance(301)
    adapter.add_printer("HP-1", "mock://hp-1")
    adapter.block = True

    first = service.list()
    assert adapter.started.wait(5)
    second = service.list()

    assert [p.name for p in first] == ["Mock Printer 1", "Mock Printer 2"]
    assert [p.name for p in second] == ["Mock Printer 1", "Mock Printer 2"]
    assert adapter.call_count("list_printers") == 2
    assert service.cache_info()["refreshing"]

    adapter.release.set()
    assert service.wait_for_refresh(5)

    refreshed = service.list()
    assert [p.name for p in refreshed] == ["Mock Printer 1", "Mock Printer 2", "HP-1"]
    assert adapter.call_count("list_printers") == 2


def test_background_refresh_failure_keeps_old_entry(store, config, clock):
    adapter = FlakyAdapter()
    service = PrintersService(adapter, store, config, clock=clock)
    service.list()
    before = store.get(config.cache_key)
    clock.advance(400)

    printers = service.list()
    assert service.wait_for_refresh(5)

    assert [p.name for p in printers] == ["Mock Printer 1", "Mock Printer 2"]
    assert store.get(config.cache_key) == before
    assert adapter.call_count("list_printers") == 2
    assert not service.cache_info()["refreshing"]


def test_empty_store_discovery_failure_propagates(store, config, clock):
    adapter = FlakyAdapter()
    service = PrintersService(adapter, store, config, clock=clock)
    service.list()
    service.clear_cache()

    with pytest.raises(TransportError):
        service.list()


def test_force_refresh_waits_for_fresh_list(service, adapter):
    service.list()
    adapter.add_printer("HP-1", "mock://hp-1")

    printers = service.list(force_refresh=True)

    assert [p.name for p in printers][-1] == "HP-1"
    assert adapter.call_count("list_printers") == 2


def test_expired_entry_is_fetched_synchronously(adapter, config, clock):
    now = [1000.0]
    store = MemoryStore(clock=lambda: now[0])
    service = PrintersService(adapter, store, config, clock=clock)
    service.list()

    now[0] += config.storage_ttl
    adapter.add_printer("HP-1", "mock://hp-1")

    printers = service.list()

    assert [p.name for p in printers][-1] == "HP-1"
    assert adapter.call_count("list_printers") == 2


def test_unreadable_entry_is_replaced(service, adapter, store, config):
    store.set(config.cache_key, "{not json")

    printers = service.list()

    assert len(printers) == 2
    assert adapter.call_count("list_printers") == 1
    CacheEntry.from_json(store.get(config.cache_key))


def test_entry_from_other_producer_with_utc_suffix_is_served(service, adapter, store, config, clock):
    printer_id = generate_printer_id("HP-1")
    store.set(config.cache_key, json.dumps({
        "printers": [{"id": printer_id, "name": "HP-1", "uri": "smb://PRINTSRV01/HP-1",
                      "cachedAt": "2026-10-19T08:50:00.000Z"}],
        "lastUpdated": "2026-10-19T08:50:00.000Z",
    }))

    printers = service.list()
    service.wait_for_refresh(5)

    assert [p.name for p in printers] == ["HP-1"]
    assert adapter.call_count("list_printers") == 1


def test_fresh_entry_with_utc_suffix_is_not_refreshed(service, adapter, store, config):
    store.set(config.cache_key, json.dumps({"printers": [], "lastUpdated": "2026-10-19T08:59:00Z"}))

    assert service.list() == []
    assert service.cache_info()["ageSeconds"] == 60.0
    assert adapter.call_count("list_printers") == 0


def test_naive_timestamp_is_read_as_utc(service, adapter, store, config):
    store.set(config.cache_key, json.dumps({"printers": [], "lastUpdated": "2026-10-19T08:59:00"}))

    assert service.list() == []
    assert service.cache_info()["stale"] is False
    assert adapter.call_count("list_printers") == 0


def test_last_updated_never_goes_backwards(service, store, config, clock):
    service.list()
    clock.now = T0 - timedelta(minutes=5)

    service.refresh_cache()

    entry = CacheEntry.from_json(store.get(config.cache_key))
    assert entry.last_updated == T0


# =============================================================================
# Lookups
# =============================================================================

def test_get_printer_by_id(service):
    wanted = service.list()[1]

    assert service.get_printer_by_id(wanted.id) == wanted
    assert service.get_printer_by_id("0000000000000000") is None


def test_require_printer_raises_not_found(service):
    with pytest.raises(PrinterNotFoundError) as exc:
        service.require_printer("0000000000000000")
    assert exc.value.printer_id == "0000000000000000"


# =============================================================================
# Print dispatch
# =============================================================================

def test_print_sends_to_the_named_queue(service, adapter):
    printer = service.list()[0]

    result = service.print(printer.id, PDF_BASE64)

    assert result.job_id.startswith("mock-job-")
    assert ("print_transfer", "Mock Printer 1") in adapter.calls


@pytest.mark.parametrize("printer_id, payload", [("", PDF_BASE64), ("abc", ""), (None, None)])
def test_print_requires_id_and_payload(service, adapter, printer_id, payload):
    with pytest.raises(ValidationError):
        service.print(printer_id, payload)
    assert adapter.call_count("print_transfer") == 0


def test_print_rejects_non_string_fields(service, adapter):
    printer_id = service.list()[0].id

    with pytest.raises(ValidationError):
        service.print(123, PDF_BASE64)
    with pytest.raises(ValidationError):
        service.print(printer_id, ["eA=="])
    assert adapter.call_count("print_transfer") == 0


def test_print_unknown_printer(service, adapter):
    service.list()

    with pytest.raises(PrinterNotFoundError):
        service.print("0000000000000000", PDF_BASE64)
    assert adapter.call_count("print_transfer") == 0


def test_print_to_new_printer_is_not_found_while_refresh_in_flight(service, adapter, clock):
    service.list()
    clock.advance(301)
    adapter.add_printer("HP-1", "mock://hp-1")
    adapter.block = True

    try:
        with pytest.raises(PrinterNotFoundError):
            service.print(generate_printer_id("HP-1"), PDF_BASE64)
    finally:
        adapter.release.set()
        service.wait_for_refresh(5)

    assert service.print(generate_printer_id("HP-1"), PDF_BASE64).job_id


def test_print_uses_stale_entry(service, adapter, clock):
    printer = service.list()[0]
    clock.advance(3600)

    result = service.print(printer.id, PDF_BASE64)
    service.wait_for_refresh(5)

    assert result.job_id
    assert adapter.call_count("print_transfer") == 1


def test_simulated_print_skips_adapter(service, adapter, config):
    config.simulate_print = True
    printer = service.list()[0]

    result = service.print(printer.id, PDF_BASE64)

    assert result.job_id.startswith("sim-")
    assert result.spooler_job_id is None
    assert adapter.call_count("print_transfer") == 0


# =============================================================================
# Maintenance
# =============================================================================

def test_clear_cache_forces_synchronous_fetch(service, adapter):
    service.list()
    service.clear_cache()

    assert service.cache_info()["count"] == 0
    service.list()
    assert adapter.call_count("list_printers") == 2


def test_cache_info(service, clock):
    empty = service.cache_info()
    assert empty["lastUpdated"] is None
    assert empty["stale"] is None

    service.list()
    clock.advance(301)
    info = service.cache_info()

    assert info["count"] == 2
    assert info["lastUpdated"] == T0.isoformat()
    assert info["ageSeconds"] == 301.0
    assert info["stale"] is True
