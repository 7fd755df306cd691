from tracker.services.imports.extractor import CandidateRow
from tracker.services.imports.reconciler import MembershipSet, lookup_values, reconcile


def _row(number, email="", phone="", name="Someone"):
    return CandidateRow(number, name, email, phone, "", "")


def test_first_occurrence_in_file_wins():
    rows = [_row(2, email="a@x.com"), _row(3, email="a@x.com"), _row(4, phone="222"), _row(5, phone="222")]

    result = reconcile(rows, MembershipSet())

    assert [r.row_number for r in result.accepted] == [2, 4]
    assert [r.row_number for r in result.skipped] == [3, 5]
    assert result.skipped_count == 2


def test_stored_values_are_skipped():
    rows = [_row(2, email="known@x.com"), _row(3, email="new@x.com")]

    result = reconcile(rows, MembershipSet(["known@x.com"]))

    assert [r.row_number for r in result.accepted] == [3]


def test_either_value_matching_skips_the_row():
    membership = MembershipSet(["a@x.com", "999"])
    rows = [_row(2, email="a@x.com", phone="111"), _row(3, email="b@x.com", phone="999")]

    result = reconcile(rows, membership)

    assert result.accepted == []
    assert result.skipped_count == 2


def test_accepted_values_join_the_membership_set():
    membership = MembershipSet()
    reconcile([_row(2, email="a@x.com", phone="111")], membership)

    assert "a@x.com" in membership
    assert "111" in membership
    assert "" not in membership


def test_empty_values_never_match():
    rows = [_row(2, email="a@x.com"), _row(3, phone="222")]

    result = reconcile(rows, MembershipSet())

    assert len(result.accepted) == 2


def test_lookup_values_are_distinct_and_non_empty():
    rows = [_row(2, email="a@x.com", phone="1"), _row(3, email="a@x.com"), _row(4, phone="2")]

    emails, phones = lookup_values(rows)

    assert emails == ["a@x.com"]
    assert phones == ["1", "2"]


def test_rows_without_email_or_phone_are_skipped():
    rows = [_row(2, email="a@x.com"), _row(3, name="Carol"), _row(4, name="Carol")]

    result = reconcile(rows, MembershipSet())

    assert [r.row_number for r in result.accepted] == [2]
    assert [r.row_number for r in result.skipped] == [3, 4]


def test_accepted_values_are_claimed_before_the_write():
    membership = MembershipSet()
    rows = [_row(2, email="a@x.com"), _row(3, email="a@x.com", phone="333")]

    result = reconcile(rows, membership)

    # Row 3 stays skipped whatever happens to row 2 in storage
    assert [r.row_number for r in result.skipped] == [3]
    assert "333" not in membership
