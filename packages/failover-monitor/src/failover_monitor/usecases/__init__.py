"""Use cases: Application logic layer."""

from failover_monitor.usecases.failover_state_machine import FailoverStateMachine
from failover_monitor.usecases.monitor_loop import MonitorLoop
from failover_monitor.usecases.settings_loader import load_settings, parse_config_yaml

__all__ = [
    "FailoverStateMachine",
    "MonitorLoop",
    "load_settings",
    "parse_config_yaml",
]
