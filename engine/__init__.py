"""
Critters - Engine
State machines, blackboards, the event log and the tick scheduler.
"""

from .blackboard import Blackboard, BlackboardValue
from .event_log import EventLog
from .scheduler import TickScheduler
from .state_machine import State, StateMachine, TimedState

__all__ = [
    "Blackboard",
    "BlackboardValue",
    "EventLog",
    "TickScheduler",
    "State",
    "StateMachine",
    "TimedState",
]
