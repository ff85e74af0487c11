"""
marsdk - collector-side contract for MAR telemetry

Build metrics, events and discovery results, validate them, and ship
them to the parent process as tagged JSON lines on stdout. Config and
credentials arrive once on stdin.
"""

__version__ = "0.1.0"

from marsdk.constants import MetricType, ReasonType, Severity
from marsdk.exceptions import InvalidRecordError, MarsdkError
from marsdk.models.bitmask import Bitmask
from marsdk.models.discovery import DiscoveryResult
from marsdk.models.event import Event
from marsdk.models.metric import Metric
from marsdk.models.reason import Reason
from marsdk.protocol import (
    Transport,
    debug,
    error,
    export_config,
    get_config,
    get_credentials,
    get_transport,
    info,
    log,
    send_discovery,
    send_events,
    send_metrics,
    send_result,
    set_transport,
    warn,
)
from marsdk.utils.filters import matches_any_filter, pass_filter
from marsdk.utils.numeric import is_hex, parse_human_size, to_hex
from marsdk.utils.process import (
    has_command,
    is_process_running,
    register_scheduled,
    run_command,
)
