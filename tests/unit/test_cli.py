"""
Unit tests -- `reportes` command line.
"""
import datetime

from reportes.cli import main
from reportes.history.client import HistoryFetchError
from reportes.history.loader import HistoryLoader
from reportes.history.models import HistoryRecord
from reportes.history.state import LOAD_ERROR_MESSAGE

_TS = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


def _loader(result):
    def fetch():
        if isinstance(result, Exception):
            raise result
        return result

    return HistoryLoader(fetch=fetch)


def _records():
    return [
        HistoryRecord(id=1, username="ana", texto_busqueda="Alhambra", tipo="unesco", creado_en=_TS),
        HistoryRecord(id=2, username="luis", lat=40.41678, lng=-3.70379, creado_en=_TS),
    ]


def test_list_prints_rows(capsys):
    assert main(["list"], loader=_loader(_records())) == 0
    out = capsys.readouterr().out
    assert "ana buscó Alhambra · unesco" in out
    assert "luis buscó (40.4168, -3.7038)" in out


def test_list_empty(capsys):
    assert main(["list"], loader=_loader([])) == 0
    assert "Aún no hay actividad." in capsys.readouterr().out


def test_list_failure_exit_code(capsys):
    assert main(["list"], loader=_loader(HistoryFetchError("HTTP 401"))) == 1
    assert LOAD_ERROR_MESSAGE in capsys.readouterr().err


def test_export_csv_writes_file(tmp_path, capsys):
    assert main(["export", "--csv", "--out", str(tmp_path)], loader=_loader(_records())) == 0
    files = list(tmp_path.glob("historial_*.csv"))
    assert len(files) == 1
    assert str(files[0]) in capsys.readouterr().out
    assert files[0].read_bytes().startswith(b"ID,Usuario")


def test_export_empty_writes_nothing(tmp_path):
    assert main(["export", "--out", str(tmp_path)], loader=_loader([])) == 0
    assert list(tmp_path.iterdir()) == []


def test_export_unwritable_target(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    assert main(["export", "--csv", "--out", str(blocker)], loader=_loader(_records())) == 1
