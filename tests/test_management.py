import pytest

from fleet_print_service.adapters import LpdAdapter, MockAdapter, RpcClientAdapter, SmbCredentials
from fleet_print_service.errors import PrinterNotFoundError, TransportError, UnsupportedOperationError
from fleet_print_service.management import PrintersManagementService
from fleet_print_service.models import Printer, PrinterState, PrintJob
from fleet_print_service.service import PrintersService, generate_printer_id
from tests.fakes import rpc_output

HP1 = generate_printer_id("HP-1")


def _management(adapter, store, config):
    printers = PrintersService(adapter, store, config)
    return PrintersManagementService(printers, adapter)


@pytest.fixture
def mock_adapter():
    adapter = MockAdapter([Printer(name="HP-1", uri="mock://hp-1")])
    adapter.jobs["HP-1"] = [PrintJob(job_id=1, printer_name="HP-1"), PrintJob(job_id=2, printer_name="HP-1")]
    return adapter


@pytest.fixture
def management(mock_adapter, store, config):
    return _management(mock_adapter, store, config)


def test_status_and_queue(management, mock_adapter):
    status = management.get_printer_status(HP1)
    jobs = management.get_queue(HP1)

    assert status.status is PrinterState.ONLINE
    assert status.jobs_in_queue == 2
    assert [j.job_id for j in jobs] == [1, 2]
    assert mock_adapter.call_count("query_status") == 1


def test_status_is_not_cached(management, mock_adapter):
    management.get_printer_status(HP1)
    management.get_printer_status(HP1)
    assert mock_adapter.call_count("query_status") == 2


def test_unknown_printer_is_not_found(management, mock_adapter):
    with pytest.raises(PrinterNotFoundError):
        management.cancel_job("0000000000000000", 1)
    assert mock_adapter.call_count("cancel_job") == 0


def test_job_control_messages(management):
    assert management.cancel_job(HP1, 1) == {"success": True, "message": "Job 1 cancelled"}
    assert management.pause_job(HP1, 2) == {"success": True, "message": "Job 2 paused"}
    assert management.resume_job(HP1, 2) == {"success": True, "message": "Job 2 resumed"}


def test_printer_control_messages(management):
    assert management.pause_printer(HP1) == {"success": True, "message": 'Printer "HP-1" paused'}
    assert management.resume_printer(HP1) == {"success": True, "message": 'Printer "HP-1" resumed'}


def test_clear_queue_reports_count(management):
    assert management.clear_queue(HP1) == {"canceledCount": 2, "message": "2 job(s) cancelled"}
    assert management.get_queue(HP1) == []


def test_transfer_only_adapter_refuses_before_lookup(runner, store, config):
    adapter = LpdAdapter("lpd.local", ["HP-1"], runner=runner)
    management = _management(adapter, store, config)

    with pytest.raises(UnsupportedOperationError) as exc:
        management.get_printer_status("0000000000000000")

    assert exc.value.variant == "lpd"
    assert exc.value.supported_by == "rpcclient"
    assert runner.calls == []


@pytest.fixture
def rpc_management(runner, store, config):
    runner.on("enumprinters", stdout=rpc_output.ENUMPRINTERS)
    runner.on("enumjobs", stdout=rpc_output.ENUMJOBS)
    creds = SmbCredentials(host="PRINTSRV01", user="svc-print", password="secret")
    adapter = RpcClientAdapter(creds, runner=runner, tmp_dir=config.tmp_dir)
    return _management(adapter, store, config)


def test_rpcclient_failed_cancel_reports_failure(runner, rpc_management):
    runner.on("setjob", exit_code=1, stderr="WERR_INVALID_PARAM")

    result = rpc_management.cancel_job(HP1, 99)

    assert result == {"success": False, "message": "Failed to cancel job 99"}


def test_rpcclient_failed_pause_printer_reports_failure(runner, rpc_management):
    runner.on("setprinter", exit_code=1, stderr="WERR_ACCESS_DENIED")

    result = rpc_management.pause_printer(HP1)

    assert result["success"] is False
    assert result["message"] == 'Failed to pause printer "HP-1"'


def test_rpcclient_status_failure_propagates(runner, rpc_management):
    runner.on("getprinter", exit_code=1, stderr="NT_STATUS_CONNECTION_REFUSED")

    with pytest.raises(TransportError):
        rpc_management.get_printer_status(HP1)


def test_rpcclient_queue(rpc_management):
    jobs = rpc_management.get_queue(HP1)
    assert [j.job_id for j in jobs] == [12, 13, 14]
