import base64

import pytest

from fleet_print_service.config import ServiceConfig
from fleet_print_service.store import MemoryStore
from tests.fakes.fake_runner import FakeRunner

PDF_BYTES = b"%PDF-1.4\n%fake\n"
PDF_BASE64 = base64.b64encode(PDF_BYTES).decode("ascii")


@pytest.fixture
def config(tmp_path):
    return ServiceConfig(
        adapter="mock",
        smb_host="PRINTSRV01",
        smb_user="svc-print",
        smb_pass="secret",
        tmp_dir=str(tmp_path / "prints"),
        stale_seconds=300,
        storage_ttl=86400,
        cache_backend="memory",
        data_dir=str(tmp_path / "data"),
        simulate_print=False,
        simulate_delay=0,
        api_key="test-key",
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def runner():
    return FakeRunner()
