"""Pending-operation states of the key state machine."""

from __future__ import annotations

from enum import Enum


class Operation(Enum):
    NOOP = "noop"
    MOVE = "move"
    COPY = "copy"
    DELETE = "delete"
    GOTO = "goto"
    INSERT = "insert"
    INSERT_FILE = "insert_file"
    INSERT_DIR = "insert_dir"
    RENAME = "rename"

    @property
    def label(self) -> str:
        """Short status-row label shown while the operation is pending."""
        return _LABELS[self]

    @property
    def is_input(self) -> bool:
        """Whether keys are collected into the input buffer in this state."""
        return self in {Operation.INSERT_FILE, Operation.INSERT_DIR, Operation.RENAME}


_LABELS = {
    Operation.NOOP: "",
    Operation.MOVE: "moving",
    Operation.COPY: "copying",
    Operation.DELETE: "confirm removing (y/n) of",
    Operation.GOTO: "g",
    Operation.INSERT: "create new (f)ile/(d)irectory",
    Operation.INSERT_FILE: "enter new file name:",
    Operation.INSERT_DIR: "enter new directory name:",
    Operation.RENAME: "renaming",
}


__all__ = ["Operation"]
