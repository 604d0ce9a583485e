"""JSONFormatter・監査ログ出力のテスト"""
import json
import logging
import sys
from pathlib import Path

from invoicing.domain.entities.audit_entry import AuditAction, AuditEntry
from invoicing.infrastructure.logging.json_formatter import JSONFormatter, get_version
from invoicing.usecases.audit_logging import log_audit


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="invoicing.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_format_outputs_json_with_context():
    """JSON形式で出力し、context を含める"""
    formatter = JSONFormatter(version="1.2.3")

    output = json.loads(formatter.format(_record("請求書を確定しました", context={"invoice_id": "inv-001"})))

    assert output["level"] == "INFO"
    assert output["version"] == "1.2.3"
    assert output["message"] == "請求書を確定しました"
    assert output["logger"] == "invoicing.test"
    assert output["context"] == {"invoice_id": "inv-001"}


def test_format_includes_exception():
    """例外情報を含める"""
    formatter = JSONFormatter(version="0.1.0")
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("失敗しました")
        record.exc_info = sys.exc_info()

    output = json.loads(formatter.format(record))

    assert output["exception"]["type"] == "ValueError"
    assert output["exception"]["message"] == "boom"


def test_get_version_reads_project_table(tmp_path: Path):
    """pyproject.toml の [project].version を読む"""
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\nversion = "2.0.1"\n', encoding="utf-8")

    assert get_version(tmp_path) == "2.0.1"


def test_get_version_without_pyproject(tmp_path: Path):
    """pyproject.toml がなければ既定のバージョン"""
    assert get_version(tmp_path) == "0.1.0"


def test_get_version_with_broken_pyproject(tmp_path: Path):
    """壊れた pyproject.toml は既定のバージョン"""
    (tmp_path / "pyproject.toml").write_text("[project\n", encoding="utf-8")

    assert get_version(tmp_path) == "0.1.0"


def test_log_audit_emits_on_audit_logger(caplog):
    """監査ログは invoicing.audit ロガーに出力される"""
    entry = AuditEntry(
        user_id="company-user",
        action=AuditAction.INVOICE_CONFIRM,
        invoice_id="inv-001",
        details="請求書を確定しました: 202405-0001",
    )

    with caplog.at_level(logging.INFO, logger="invoicing.audit"):
        log_audit(entry)

    record = caplog.records[-1]
    assert record.name == "invoicing.audit"
    assert record.context == {
        "event_type": "INVOICE_CONFIRM",
        "user_id": "company-user",
        "invoice_id": "inv-001",
    }
