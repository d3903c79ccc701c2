import logging

import pytest

from unions import NonExhaustiveMatchError
from unions.demo import (
    EXAMPLE_TREE,
    Contact,
    DivisionResult,
    SubmissionResult,
    demonstrations,
    describe_division,
    describe_submission,
    how_to_contact,
    main,
    safe_divide,
    submit_work,
)
from unions.tree import is_valid_bst


@pytest.mark.parametrize(
    ("contact", "expected"),
    [
        (Contact.Email("anthony.g@csulb.edu"), "Email them at anthony.g@csulb.edu"),
        (Contact.Phone(5629855555), "Call them at 5629855555"),
        (Contact.MailingAddress("Nice try"), "Mail them at Nice try"),
        (Contact.PhoneExt(12345, 9999), "Call them at 12345 ext. 9999"),
    ],
)
def test_how_to_contact(contact, expected):
    assert how_to_contact(contact) == expected


def test_how_to_contact_rejects_other_unions():
    with pytest.raises(NonExhaustiveMatchError):
        how_to_contact(SubmissionResult.ACCEPTED)


def test_submit_work():
    assert submit_work(0.8) is SubmissionResult.ACCEPTED
    assert submit_work(1.0) is SubmissionResult.ACCEPTED
    assert submit_work(0.7) == SubmissionResult.RejectMessage(
        "work harder, you lazy bum"
    )


def test_describe_submission():
    assert describe_submission(SubmissionResult.ACCEPTED) == "Work was accepted!"
    assert (
        describe_submission(submit_work(0.7))
        == "Work was rejected: work harder, you lazy bum"
    )
    with pytest.raises(NonExhaustiveMatchError):
        describe_submission(DivisionResult.UNDEFINED)


@pytest.mark.parametrize(
    ("dividend", "divisor", "expected"),
    [
        (10, 3, 3),
        (10, -3, -3),
        (-7, 2, -3),
        (-7, -2, 3),
        (0, 5, 0),
    ],
)
def test_safe_divide(dividend, divisor, expected):
    assert safe_divide(dividend, divisor) == DivisionResult.Quotient(expected)


def test_safe_divide_by_zero():
    assert safe_divide(10, 0) is DivisionResult.UNDEFINED
    assert safe_divide(0, 0) is DivisionResult.UNDEFINED


def test_describe_division():
    assert describe_division(safe_divide(10, 3)) == (
        "That division succeeded and equals 3"
    )
    assert describe_division(safe_divide(10, 0)) == "That division failed"


def test_example_tree_is_a_search_tree():
    assert is_valid_bst(EXAMPLE_TREE)


def test_demonstrations():
    assert demonstrations() == [
        "Email them at anthony.g@csulb.edu",
        "Call them at 5629855555",
        "Mail them at Nice try",
        "Call them at 12345 ext. 9999",
        "Work was rejected: work harder, you lazy bum",
        "That division succeeded and equals 3",
        "That division failed",
        "Tree is empty? False",
        "Tree height: 2",
        "Tree max value: 15",
        "Tree contains 15? True",
    ]


def test_main(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == demonstrations()


def test_main_verbose_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="unions")
    assert main(["-v"]) == 0
    assert "Running demonstrations" in caplog.text
