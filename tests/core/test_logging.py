import json
import logging

from core.logging import AppLogger
from core.logging.formatters import ColorizedFormatter


def test_json_errors_log(tmp_path):
    log_path = tmp_path / "logs" / "errors.log"
    logger = AppLogger(debug=False, error_log_path=str(log_path))
    logger.info("Cart loaded", items_count=2)
    logger.warning("Stored cart snapshot is malformed", storage_key="cart")
    lines = log_path.read_text().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["severity"] == "WARNING"
    assert record["body"] == "Stored cart snapshot is malformed"
    assert record["attributes"] == {"storage_key": "cart"}


def test_colorized_formatter_renders_attrs():
    record = logging.LogRecord("CART", logging.INFO, "x.py", 1, "hello", (), None)
    record.attrs = {"product_id": "p1", "operation": "increment"}
    rendered = ColorizedFormatter().format(record)
    assert "hello" in rendered
    assert "product_id=p1, operation=increment" in rendered
