"""Tests for pipeline events."""

import logging

from pcba_export.events import EventCollector, EventLevel, PipelineEvent, log_event


class TestPipelineEvent:
    """Tests for PipelineEvent formatting."""

    def test_plain(self):
        event = PipelineEvent(EventLevel.INFO, "BOM stream extracted (x_BOM.csv)")
        assert str(event) == "INFO: BOM stream extracted (x_BOM.csv)"

    def test_with_document(self):
        event = PipelineEvent(EventLevel.WARNING, "skipped", document="CPL")
        assert str(event) == "WARNING: [CPL] skipped"

    def test_with_document_and_line(self):
        event = PipelineEvent(EventLevel.ERROR, "bad row", document="BOM", line=5)
        assert str(event) == "ERROR: [BOM:5] bad row"

    def test_logging_levels(self):
        assert EventLevel.INFO.logging_level == logging.INFO
        assert EventLevel.WARNING.logging_level == logging.WARNING
        assert EventLevel.ERROR.logging_level == logging.ERROR


class TestEventCollector:
    """Tests for EventCollector."""

    def test_collects_in_order(self):
        collector = EventCollector()
        collector(PipelineEvent(EventLevel.INFO, "one"))
        collector(PipelineEvent(EventLevel.WARNING, "two"))
        collector(PipelineEvent(EventLevel.ERROR, "three"))

        assert collector.messages() == ["one", "two", "three"]
        assert [e.message for e in collector.warnings] == ["two"]
        assert [e.message for e in collector.errors] == ["three"]
        assert len(collector.by_level(EventLevel.INFO)) == 1


class TestLogEvent:
    """Tests for the default logging handler."""

    def test_logs_at_event_level(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="pcba_export.events"):
            log_event(PipelineEvent(EventLevel.WARNING, "careful", document="BOM"))

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "WARNING: [BOM] careful"
