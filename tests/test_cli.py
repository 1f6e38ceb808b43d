from datetime import date

import pytest

import billing_cli
from langschool.services import attendance


def test_resolve_period_defaults_to_previous_month():
    assert billing_cli.resolve_period(None, None, today=date(2024, 4, 3)) == (2024, 3)
    assert billing_cli.resolve_period(None, None, today=date(2024, 1, 15)) == (2023, 12)
    assert billing_cli.resolve_period(2024, 7) == (2024, 7)
    with pytest.raises(SystemExit):
        billing_cli.resolve_period(2024, None)


def test_parser_rejects_unknown_command():
    with pytest.raises(SystemExit):
        billing_cli.build_parser().parse_args(["publish"])


def test_generate_and_debtors_commands(db, make_student, make_course, make_enrollment, capsys):
    enrollment = make_enrollment(make_student("Anna"), make_course(subscription_price="0"))
    attendance.set_count(db, enrollment.id, 2024, 3, 2)

    assert billing_cli.cmd_generate(db, 2024, 3) == 0
    assert billing_cli.cmd_debtors(db) == 0
    assert capsys.readouterr().out == ""  # drafts are not debt
