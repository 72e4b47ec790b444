"""Tests for metadata-driven CRUD on one entity type."""

from datetime import date

import pytest

from bureaucrat.core.types import EntityMeta, FieldMeta, FieldType
from bureaucrat.data.entity_query import EntityQuery
from bureaucrat.exceptions import (
    MissingIdentifierFieldError,
    MissingIdentifierValueError,
    MissingMandatoryFieldError,
    NoIdentifierFieldsError,
    UnexpectedAffectedRowCountError,
    UnexpectedReadCountError,
    UnknownFieldsError,
)

# Field codes deliberately differ from column names
PERSON = EntityMeta(
    code="person",
    name="Person",
    table="user",
    fields=[
        FieldMeta(
            code="key",
            column="id",
            name="Id",
            type=FieldType.NUMBER,
            identifier=True,
            hidden=True,
            generated=True,
        ),
        FieldMeta(code="firstName", column="first_name", name="First Name", mandatory=True),
        FieldMeta(code="lastName", column="last_name", name="Last Name"),
        FieldMeta(code="born", column="birth_date", name="Birth Date", type=FieldType.DATE),
    ],
)

LOG = EntityMeta(
    code="log",
    name="Log",
    table="log",
    fields=[FieldMeta(code="line", column="line", name="Line")],
)

ROW = {"id": 1, "first_name": "Douglas", "last_name": "Adams", "birth_date": "1767-07-11"}


class TestCreate:
    """Tests for EntityQuery.create."""

    def test_insert_by_column(self, make_store):
        store = make_store(last_inserted_id=6)
        created = EntityQuery(store, PERSON).create({"firstName": "Douglas", "lastName": "Adams"})

        assert store.statements == [
            ('INSERT INTO "user"("first_name", "last_name") VALUES (?, ?)', ("Douglas", "Adams"))
        ]
        assert created == {"key": 6, "firstName": "Douglas", "lastName": "Adams"}

    def test_generated_id_overrides_caller_value(self, make_store):
        store = make_store(last_inserted_id=6)
        created = EntityQuery(store, PERSON).create({"key": 99, "firstName": "Douglas"})
        assert created["key"] == 6

    def test_no_generated_id_returns_data(self, make_store):
        store = make_store(last_inserted_id=None)
        data = {"firstName": "Douglas"}
        assert EntityQuery(store, PERSON).create(data) == data

    def test_dates_encoded_as_iso_text(self, make_store):
        store = make_store()
        EntityQuery(store, PERSON).create({"firstName": "Douglas", "born": date(1767, 7, 11)})
        assert store.statements[0][1] == ("Douglas", "1767-07-11")

    def test_returned_values_decoded_like_read(self, make_store):
        store = make_store(last_inserted_id=6)
        created = EntityQuery(store, PERSON).create({"firstName": "Douglas", "born": "1767-07-11"})
        assert created == {"key": 6, "firstName": "Douglas", "born": date(1767, 7, 11)}

    def test_unknown_fields_listed(self, make_store):
        store = make_store()
        with pytest.raises(UnknownFieldsError) as exc_info:
            EntityQuery(store, PERSON).create({"firstName": "D", "first_name": "D", "bogus": 1})
        assert exc_info.value.unknown == ["first_name", "bogus"]
        assert store.statements == []

    def test_missing_mandatory(self, make_store):
        store = make_store()
        with pytest.raises(MissingMandatoryFieldError) as exc_info:
            EntityQuery(store, PERSON).create({"lastName": "Adams"})
        assert exc_info.value.field_code == "firstName"

    def test_mandatory_none_rejected(self, make_store):
        with pytest.raises(MissingMandatoryFieldError):
            EntityQuery(make_store(), PERSON).create({"firstName": None})


class TestRead:
    """Tests for EntityQuery.read."""

    def test_read_all_decodes_by_field_code(self, make_store):
        store = make_store({"user": ([], [ROW])})
        rows = EntityQuery(store, PERSON).read()
        assert rows == [
            {"key": 1, "firstName": "Douglas", "lastName": "Adams", "born": date(1767, 7, 11)}
        ]
        assert list(rows[0]) == PERSON.field_codes
        assert store.queries == [('SELECT *\nFROM "user"', ())]

    def test_read_by_ids_ignores_other_keys(self, make_store):
        store = make_store({"user": ([], [ROW])})
        EntityQuery(store, PERSON).read(ids={"key": 1, "firstName": "ignored"})
        assert store.queries == [('SELECT *\nFROM "user"\nWHERE "id" = ?', (1,))]

    def test_read_with_limit(self, make_store):
        store = make_store({"user": ([], [])})
        EntityQuery(store, PERSON).read(limit=0)
        assert store.queries == [('SELECT *\nFROM "user"\nLIMIT ?', (0,))]

    def test_missing_identifier_field(self, make_store):
        with pytest.raises(MissingIdentifierFieldError) as exc_info:
            EntityQuery(make_store(), PERSON).read(ids={"bogus": 1})
        assert exc_info.value.field_code == "key"

    def test_no_identifier_fields(self, make_store):
        with pytest.raises(NoIdentifierFieldsError):
            EntityQuery(make_store(), LOG).read(ids={"line": "x"})

    def test_absent_columns_read_as_none(self, make_store):
        store = make_store({"user": ([], [{"id": 2}])})
        rows = EntityQuery(store, PERSON).read()
        assert rows == [{"key": 2, "firstName": None, "lastName": None, "born": None}]


class TestUpdate:
    """Tests for EntityQuery.update."""

    def test_update_sets_present_fields_only(self, make_store):
        store = make_store({"user": ([], [ROW])})
        updated = EntityQuery(store, PERSON).update({"key": 1, "lastName": None})

        assert store.statements == [('UPDATE "user"\nSET "last_name" = ?\nWHERE "id" = ?', (None, 1))]
        assert updated["firstName"] == "Douglas"

    def test_missing_identifier_value(self, make_store):
        store = make_store()
        with pytest.raises(MissingIdentifierValueError):
            EntityQuery(store, PERSON).update({"key": None, "firstName": "Rick"})
        assert store.statements == []

    @pytest.mark.parametrize("rowcount", [0, 2])
    def test_affected_rows_must_be_one(self, make_store, rowcount):
        store = make_store({"user": ([], [ROW])}, rowcount=rowcount)
        with pytest.raises(UnexpectedAffectedRowCountError) as exc_info:
            EntityQuery(store, PERSON).update({"key": 1, "firstName": "Rick"})
        assert exc_info.value.count == rowcount
        assert exc_info.value.operation == "update"

    def test_read_back_must_return_one(self, make_store):
        store = make_store({"user": ([], [ROW, dict(ROW, id=2)])})
        with pytest.raises(UnexpectedReadCountError) as exc_info:
            EntityQuery(store, PERSON).update({"key": 1, "firstName": "Rick"})
        assert exc_info.value.count == 2

    def test_no_identifier_fields(self, make_store):
        with pytest.raises(NoIdentifierFieldsError):
            EntityQuery(make_store(), LOG).update({"line": "x"})


class TestDelete:
    """Tests for EntityQuery.delete."""

    def test_delete(self, make_store):
        store = make_store()
        assert EntityQuery(store, PERSON).delete({"key": 3}) is None
        assert store.statements == [('DELETE FROM "user"\nWHERE "id" = ?', (3,))]

    def test_affected_rows_must_be_one(self, make_store):
        with pytest.raises(UnexpectedAffectedRowCountError) as exc_info:
            EntityQuery(make_store(rowcount=0), PERSON).delete({"key": 3})
        assert exc_info.value.operation == "delete"
        assert exc_info.value.count == 0

    def test_missing_identifier_value(self, make_store):
        with pytest.raises(MissingIdentifierValueError) as exc_info:
            EntityQuery(make_store(), PERSON).delete({})
        assert exc_info.value.field_code == "key"
