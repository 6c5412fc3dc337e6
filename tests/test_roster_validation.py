import pytest

from roster_rules import (
    InvalidTownHallError,
    InvalidValueError,
    RosterMember,
    normalize_player_tag,
    parse_player_tags,
    parse_town_hall,
    validate_max_members,
    validate_town_hall,
)
from roster_rules.models import (
    coerce_town_hall,
    roster_from_document,
    roster_to_document,
)


def test_parse_player_tags_accepts_hashless_input():
    tags = parse_player_tags("abc123 #DEF456")
    assert tags == ["#ABC123", "#DEF456"]


def test_parse_player_tags_accepts_commas():
    assert parse_player_tags("#AAA111,#BBB222") == ["#AAA111", "#BBB222"]


def test_parse_player_tags_rejects_duplicates():
    with pytest.raises(InvalidValueError):
        parse_player_tags("#AAA111 #AAA111")


def test_parse_player_tags_rejects_empty_input():
    with pytest.raises(InvalidValueError):
        parse_player_tags("   ")


def test_parse_player_tags_rejects_invalid_format():
    with pytest.raises(InvalidValueError):
        parse_player_tags("invalid!tag")


def test_normalize_player_tag_variants():
    assert normalize_player_tag(" #abc123 ") == "#ABC123"
    with pytest.raises(InvalidValueError):
        normalize_player_tag("")


def test_parse_town_hall_blank_means_unset():
    assert parse_town_hall(None) is None
    assert parse_town_hall("") is None
    assert parse_town_hall("   ") is None


def test_parse_town_hall_accepts_numbers_and_th_prefix():
    assert parse_town_hall("16") == 16
    assert parse_town_hall(" th15 ") == 15
    assert parse_town_hall("TH 18") == 18


def test_parse_town_hall_rejects_out_of_range():
    for raw in ("0", "19", "-2"):
        with pytest.raises(InvalidTownHallError):
            parse_town_hall(raw)


def test_parse_town_hall_rejects_non_numeric():
    with pytest.raises(InvalidTownHallError):
        parse_town_hall("sixteen")


def test_invalid_town_hall_is_a_value_error():
    with pytest.raises(InvalidValueError):
        validate_town_hall(25)
    assert validate_town_hall(None) is None
    assert validate_town_hall(1) == 1
    assert validate_town_hall(18) == 18


def test_validate_max_members_bounds():
    assert validate_max_members(1) == 1
    assert validate_max_members(5) == 5
    assert validate_max_members(10) == 10
    with pytest.raises(InvalidValueError):
        validate_max_members(0)
    with pytest.raises(InvalidValueError):
        validate_max_members(11)


def test_roster_member_from_dict_handles_missing_town_hall():
    member = RosterMember.from_dict({"name": "Alpha", "tag": "#A1"})
    assert member.town_hall is None
    assert member.display() == "Alpha (TH?) #A1"

    member = RosterMember.from_dict({"name": "Bravo", "tag": "#B2", "town_hall": "17"})
    assert member.town_hall == 17
    assert member.display() == "Bravo (TH17) #B2"


def test_roster_document_accepts_list_or_members_object():
    members = [
        RosterMember(name="Alpha", tag="#A1", town_hall=18),
        RosterMember(name="Bravo", tag="#B2", town_hall=None),
    ]
    document = roster_to_document(members)
    assert roster_from_document(document) == members
    assert roster_from_document({"members": document}) == members


def test_roster_document_rejects_bad_shapes():
    with pytest.raises(ValueError):
        roster_from_document("not a roster")
    with pytest.raises(ValueError):
        roster_from_document([1, 2, 3])


def test_roster_member_blank_town_hall_is_unset():
    member = RosterMember.from_dict({"name": "A", "tag": "#A", "town_hall": ""})
    assert member.town_hall is None
    assert coerce_town_hall(" th16 ") == 16


@pytest.mark.parametrize("raw", [[18], {"level": 18}, 17.9, True, False])
def test_roster_member_rejects_non_integer_town_hall(raw):
    with pytest.raises(InvalidTownHallError):
        RosterMember.from_dict({"name": "Alpha", "tag": "#A1", "town_hall": raw})


@pytest.mark.parametrize("raw", [25, 0, -1, "19"])
def test_roster_member_rejects_out_of_range_town_hall(raw):
    with pytest.raises(InvalidTownHallError):
        roster_from_document([{"name": "Alpha", "tag": "#A1", "town_hall": raw}])
