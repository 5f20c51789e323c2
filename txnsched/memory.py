"""Typed tuple storage and the messages and results that carry it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from txnsched.engine_types import TransactionStatus


class Memory:
    """An ordered collection of tuples whose element types are checked on retrieval."""

    def __init__(self) -> None:
        self._tuples: list[tuple[Any, ...]] = []

    def add_tuple(self, *args: Any) -> None:
        """Store a tuple, given either as one tuple or as its elements."""
        if len(args) == 1 and isinstance(args[0], tuple):
            self._tuples.append(args[0])
        else:
            self._tuples.append(tuple(args))

    def get_tuple(self, index: int, *args: type) -> tuple[Any, ...]:
        """Return the tuple at index; when types are given they must match exactly."""
        record = self._tuples[index]
        if args and (
            len(args) != len(record)
            or any(type(value) is not expected for value, expected in zip(record, args))
        ):
            raise TypeError("stored tuple does not have the requested element types")
        return record

    def __len__(self) -> int:
        return len(self._tuples)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self._tuples)


@dataclass
class Message:
    """A prompt with optional parameters, addressed between agents."""

    prompt: str = ""
    parameters: Memory | None = None
    sender_id: int = -1
    sender_type: int = -1
    receiver_id: int = -1
    receiver_type: int = -1
    time_stamp: int = 0


@dataclass(init=False)
class TransactionResult(Message):
    """Outcome of a transaction: its status and either an error or result parameters."""

    status: TransactionStatus = TransactionStatus.SUCCESSFUL
    error_message: str | None = None
    result_parameters: Memory | None = None

    def __init__(
        self,
        status: TransactionStatus,
        error_message: str | None = None,
        result_parameters: Memory | None = None,
    ) -> None:
        super().__init__()
        self.status = status
        self.error_message = error_message
        self.result_parameters = result_parameters


def generate_memory() -> Memory:
    return Memory()


def generate_message(
    prompt: str | Memory | None = None, parameters: Memory | None = None
) -> Message:
    """Build a message from a prompt, parameters, both or neither."""
    if isinstance(prompt, Memory):
        if parameters is not None:
            raise TypeError("parameters given twice")
        prompt, parameters = None, prompt
    return Message(prompt=prompt if prompt is not None else "", parameters=parameters)