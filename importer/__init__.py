"""
Import sequencing: adds link records to a reading list destination.
"""

from importer.models import ImportLedger, ImportMode
from importer.sequencer import StepwiseImport, add_link, drive_stepwise, run, run_bulk
from importer.session import ImportSession
from importer.sink import BaseLinkSink, SinkError, is_valid_url

__all__ = [
    "BaseLinkSink",
    "ImportLedger",
    "ImportMode",
    "ImportSession",
    "SinkError",
    "StepwiseImport",
    "add_link",
    "drive_stepwise",
    "is_valid_url",
    "run",
    "run_bulk",
]
