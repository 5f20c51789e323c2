"""Enumerations shared by the transaction engine."""

from __future__ import annotations

from enum import IntEnum


class AgentOperationType(IntEnum):
    """Agent life-cycle operations recorded in a transaction log."""

    CREATE = 0
    CREATEANDSTART = 1
    DESTROY = 2
    START = 3
    STOP = 4


class AgentStatus(IntEnum):
    ACTIVE = 0
    ASSIGNED = 1
    IDLE = 2


class ParameterType(IntEnum):
    AGENTSTATUS = 0
    BOOL = 1
    INT = 2
    LONG = 3
    DOUBLE = 4
    PLUGINSTATUS = 5
    SHAREDPOINTER = 6
    STRING = 7


class PluginStatus(IntEnum):
    FREE = 0
    SEIZED = 1


class PluginType(IntEnum):
    SHAREABLE = 0
    NONSHAREABLE = 1


class TransactionStatus(IntEnum):
    ABORTED = 0
    FAILED = 1
    SUCCESSFUL = 2


class TransactionType(IntEnum):
    BEGIN = 0
    COMMUNICATE = 1
    CREATEAGENT = 2
    DESTROYAGENT = 3
    GETAGENTINFO = 4
    HALTPROGRAM = 5
    OPERATE = 6
    PROCESS = 7
    STARTAGENT = 8
    STOPAGENT = 9