"""
Worked examples: a few small unions and a driver that walks through them.

Run ``python -m unions.demo`` to print the demonstrations.
"""
from __future__ import annotations

import argparse
import logging

from dataclasses import dataclass

from unions import ADT
from unions.errors import NonExhaustiveMatchError
from unions.tree import (
    BinaryTree,
    Node,
    find_max_value,
    height,
    is_empty,
    leaf,
    tree_contains,
)

log = logging.getLogger(__name__)


class Contact(ADT):
    """One way of reaching somebody."""

    @dataclass(frozen=True)
    class Email:
        address: str

    @dataclass(frozen=True)
    class Phone:
        number: int

    @dataclass(frozen=True)
    class MailingAddress:
        address: str

    @dataclass(frozen=True)
    class PhoneExt:
        number: int
        extension: int


def how_to_contact(contact: Contact) -> str:
    return Contact.match(
        contact,
        Email=lambda address: f"Email them at {address}",
        Phone=lambda number: f"Call them at {number}",
        MailingAddress=lambda address: f"Mail them at {address}",
        PhoneExt=lambda number, extension: f"Call them at {number} ext. {extension}",
    )


class SubmissionResult(ADT):
    ACCEPTED = "accepted"

    @dataclass(frozen=True)
    class RejectMessage:
        message: str


def submit_work(effort_level: float) -> SubmissionResult:
    if effort_level >= 0.8:
        return SubmissionResult.ACCEPTED
    return SubmissionResult.RejectMessage("work harder, you lazy bum")


def describe_submission(result: SubmissionResult) -> str:
    match result:
        case SubmissionResult.ACCEPTED:
            return "Work was accepted!"
        case SubmissionResult.RejectMessage(message):
            return f"Work was rejected: {message}"
        case _:
            raise NonExhaustiveMatchError(
                "%r is not a SubmissionResult" % (result,)
            )


class DivisionResult(ADT):
    """The outcome of an integer division that may have no answer."""

    @dataclass(frozen=True)
    class Quotient:
        value: int

    UNDEFINED = "undefined"


def safe_divide(dividend: int, divisor: int) -> DivisionResult:
    """
    Divide without raising: a zero divisor gives ``UNDEFINED``.

    The quotient is truncated toward zero, so ``safe_divide(-7, 2)`` is
    ``Quotient(-3)``.
    """
    if divisor == 0:
        return DivisionResult.UNDEFINED
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        quotient = -quotient
    return DivisionResult.Quotient(quotient)


def describe_division(result: DivisionResult) -> str:
    return DivisionResult.match(
        result,
        Quotient=lambda value: f"That division succeeded and equals {value}",
        UNDEFINED=lambda: "That division failed",
    )


EXAMPLE_TREE: BinaryTree = Node(
    10,
    Node(5, leaf(2), leaf(7)),
    leaf(15),
)


def demonstrations() -> list[str]:
    """Lines printed by ``main``, in order."""
    contacts = [
        Contact.Email("anthony.g@csulb.edu"),
        Contact.Phone(5629855555),
        Contact.MailingAddress("Nice try"),
        Contact.PhoneExt(12345, 9999),
    ]
    lines = [how_to_contact(contact) for contact in contacts]

    lines.append(describe_submission(submit_work(0.7)))
    lines.append(describe_division(safe_divide(10, 3)))
    lines.append(describe_division(safe_divide(10, 0)))

    tree = EXAMPLE_TREE
    lines.append(f"Tree is empty? {is_empty(tree)}")
    lines.append(f"Tree height: {height(tree)}")
    lines.append(f"Tree max value: {find_max_value(tree)}")
    lines.append(f"Tree contains 15? {tree_contains(15, tree)}")
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m unions.demo",
        description="Walk through a few discriminated union examples.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    log.debug("Running demonstrations")
    for line in demonstrations():
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
